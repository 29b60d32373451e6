"""NoteService — note lifecycle and vault-wide rename propagation.

Renaming a note rewrites every ``[[Old]]``, ``[[Old|`` and ``[[Old#``
link in the other notes of its vault. A note's ``updated_at`` moves only
when its content actually changed.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from wikigraph.domain.edit_blocks import EditKind, parse_edit_blocks, strip_edit_blocks
from wikigraph.domain.links import apply_wikilink_rename
from wikigraph.domain.types import Note
from wikigraph.infrastructure.store import NoteNotFoundError
from wikigraph.services._helpers import dump_items, now_ms
from wikigraph.services.base import BaseService
from wikigraph.services.result import ServiceResult
from wikigraph.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from wikigraph.infrastructure.store import StoreTransaction

logger = logging.getLogger(__name__)


class NoteService(BaseService):
    """Handles note creation, edits, renames and deletion."""

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    @traced
    def create_note(
        self,
        vault_id: str,
        title: str,
        *,
        folder_id: str | None = None,
        content: str = "",
    ) -> ServiceResult:
        """Create a note at the end of its folder."""
        op = "create_note"
        if not title.strip():
            return ServiceResult.failure(op, "EMPTY_TITLE", "Note title must not be empty")
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing

        with self._store.transaction() as txn:
            note = txn.insert_note(
                vault_id,
                title,
                created_at=now_ms(),
                folder_id=folder_id,
                content=content,
            )
        logger.debug("created note %s in vault %s", note.id, vault_id)
        return ServiceResult(ok=True, op=op, data=note.model_dump(by_alias=True))

    def get(self, note_id: str, vault_id: str | None = None) -> ServiceResult:
        note = self._resolve_note("get", note_id, vault_id)
        if not isinstance(note, Note):
            return note
        return ServiceResult(ok=True, op="get", data=note.model_dump(by_alias=True))

    def list_notes(self, vault_id: str) -> ServiceResult:
        """All notes of *vault_id* in storage order."""
        op = "list_notes"
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing
        items = self._store.list_notes_by_vault(vault_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"vault_id": vault_id, "count": len(items), "items": dump_items(items)},
        )

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    @traced
    def update_content(
        self,
        note_id: str,
        content: str,
        vault_id: str | None = None,
    ) -> ServiceResult:
        """Replace a note's content and bump ``updated_at``."""
        op = "update_content"
        note = self._resolve_note(op, note_id, vault_id)
        if not isinstance(note, Note):
            return note

        updated_at = now_ms()
        with self._store.transaction() as txn:
            txn.patch_note(note.id, content=content, updated_at=updated_at)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": note.id, "updatedAt": updated_at, "changed": content != note.content},
        )

    @traced
    def delete(self, note_id: str, vault_id: str | None = None) -> ServiceResult:
        """Delete a note. Links pointing at it are left as they are."""
        op = "delete"
        note = self._resolve_note(op, note_id, vault_id)
        if not isinstance(note, Note):
            return note
        with self._store.transaction() as txn:
            txn.delete_note(note.id)
        return ServiceResult(ok=True, op=op, data={"id": note.id, "title": note.title})

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    @traced
    def rename(self, note_id: str, new_title: str, vault_id: str | None = None) -> ServiceResult:
        """Rename a note and rewrite links to it across its vault.

        The target is resolved and scope-checked before anything is
        written. The new title is always persisted, even when unchanged.
        Propagation then patches each other note whose content changes.

        By default every write is its own transaction and the first
        failure stops propagation without undoing earlier writes; the
        failure lists the ids already rewritten. With ``rename.atomic``
        the title change and all rewrites commit or roll back together.
        """
        op = "rename"
        if not new_title.strip():
            return ServiceResult.failure(op, "EMPTY_TITLE", "Note title must not be empty")
        note = self._resolve_note(op, note_id, vault_id)
        if not isinstance(note, Note):
            return note

        old_title = note.title
        atomic = self._store.settings.rename.atomic
        updated: list[str] = []

        try:
            with self._store.transaction() if atomic else nullcontext() as shared:
                with self._write_scope(shared) as txn:
                    txn.patch_note(note.id, title=new_title, updated_at=now_ms())

                if old_title != new_title:
                    with trace_span("propagate") as span:
                        corpus = (shared or self._store).list_notes_by_vault(note.vault_id)
                        for other in corpus:
                            if other.id == note.id:
                                continue
                            content = apply_wikilink_rename(other.content, old_title, new_title)
                            if content == other.content:
                                continue
                            with self._write_scope(shared) as txn:
                                txn.patch_note(other.id, content=content, updated_at=now_ms())
                            updated.append(other.id)
                        if span:
                            span.annotate("scanned", len(corpus) - 1)
                            span.annotate("rewritten", len(updated))
        except (SQLAlchemyError, NoteNotFoundError) as exc:
            logger.warning("rename of %s failed after %d rewrites: %s", note.id, len(updated), exc)
            return ServiceResult.failure(
                op,
                "PROPAGATION_FAILED",
                f"Rename of '{old_title}' failed: {exc}",
                id=note.id,
                updated=[] if atomic else updated,
                atomic=atomic,
            )

        logger.debug(
            "renamed %s %r -> %r, rewrote links in %d notes",
            note.id,
            old_title,
            new_title,
            len(updated),
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": note.id,
                "old_title": old_title,
                "new_title": new_title,
                "updated": updated,
                "count": len(updated),
            },
        )

    def _write_scope(
        self, shared: StoreTransaction | None
    ) -> AbstractContextManager[StoreTransaction]:
        """Reuse the shared transaction, or open a fresh one per write."""
        if shared is not None:
            return nullcontext(shared)
        return self._store.transaction()

    # ------------------------------------------------------------------
    # Edit blocks
    # ------------------------------------------------------------------

    @traced
    def apply_edit_blocks(self, vault_id: str, text: str) -> ServiceResult:
        """Apply every ``edit``/``create`` block found in *text*.

        ``edit`` targets the first note whose title matches ignoring case;
        a block with no match is skipped with a warning. ``create`` makes a
        new note and then sets its content.
        """
        op = "apply_edit_blocks"
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing

        blocks = parse_edit_blocks(text)
        applied: list[dict[str, Any]] = []
        warnings: list[str] = []

        for block in blocks:
            if block.kind is EditKind.CREATE:
                created = self.create_note(vault_id, block.note_title)
                if not created.ok:
                    reason = created.error.message if created.error else "unknown error"
                    warnings.append(f"Could not create '{block.note_title}': {reason}")
                    continue
                new_id = created.data["id"]
                self.update_content(new_id, block.content, vault_id)
                applied.append({"kind": block.kind.value, "id": new_id, "title": block.note_title})
                continue

            wanted = block.note_title.lower()
            match = next(
                (n for n in self._store.list_notes_by_vault(vault_id) if n.title.lower() == wanted),
                None,
            )
            if match is None:
                warnings.append(f"No note titled '{block.note_title}' to edit")
                continue
            self.update_content(match.id, block.content, vault_id)
            applied.append({"kind": block.kind.value, "id": match.id, "title": match.title})

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(applied),
                "items": applied,
                "blocks": len(blocks),
                "prose": strip_edit_blocks(text),
            },
            warnings=warnings,
        )
