"""VaultService — create and list vaults."""

from __future__ import annotations

from wikigraph.services._helpers import dump_items, now_ms
from wikigraph.services.base import BaseService
from wikigraph.services.result import ServiceResult
from wikigraph.services.telemetry import traced


class VaultService(BaseService):
    """Handles vault lifecycle."""

    @traced
    def create(self, name: str) -> ServiceResult:
        op = "create_vault"
        if not name.strip():
            return ServiceResult.failure(op, "EMPTY_TITLE", "Vault name must not be empty")
        with self._store.transaction() as txn:
            vault = txn.insert_vault(name, created_at=now_ms())
        return ServiceResult(ok=True, op=op, data=vault.model_dump(by_alias=True))

    def list_vaults(self) -> ServiceResult:
        items = self._store.list_vaults()
        return ServiceResult(
            ok=True,
            op="list_vaults",
            data={"count": len(items), "items": dump_items(items)},
        )
