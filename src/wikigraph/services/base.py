"""BaseService — foundation for all wikigraph services.

Every service receives a :class:`NoteStore` at construction time. The
store provides note reads, full-text search, transactions, and the link
graph. Services own their transaction boundaries via
``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wikigraph.services.result import ServiceResult

if TYPE_CHECKING:
    from wikigraph.domain.types import Note
    from wikigraph.infrastructure.store import NoteStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class NoteService(BaseService):
            def rename(self, note_id: str, new_title: str) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: NoteStore) -> None:
        self._store = store

    def _resolve_note(
        self,
        op: str,
        note_id: str,
        vault_id: str | None = None,
    ) -> Note | ServiceResult:
        """Load *note_id*, checking it belongs to *vault_id* when given.

        Returns the note, a NOT_FOUND failure, or a VAULT_MISMATCH failure
        when the note lives in another vault.
        """
        note = self._store.get_note(note_id)
        if note is None:
            return ServiceResult.failure(
                op,
                "NOT_FOUND",
                f"No note found with ID '{note_id}'",
                note_id=note_id,
            )
        if vault_id is not None and note.vault_id != vault_id:
            logger.debug("note %s is outside vault %s", note_id, vault_id)
            return ServiceResult.failure(
                op,
                "VAULT_MISMATCH",
                f"Note '{note_id}' does not belong to vault '{vault_id}'",
                note_id=note_id,
                vault_id=vault_id,
            )
        return note

    def _require_vault(self, op: str, vault_id: str) -> ServiceResult | None:
        """Return a NOT_FOUND failure when *vault_id* does not exist."""
        if self._store.get_vault(vault_id) is None:
            return ServiceResult.failure(
                op,
                "NOT_FOUND",
                f"No vault found with ID '{vault_id}'",
                vault_id=vault_id,
            )
        return None
