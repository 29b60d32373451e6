"""ContextAssembler — budgeted note context for an AI chat turn.

Notes relevant to the user's message are found through both search
indexes, merged, and rendered in two tiers under a character budget.
When search finds nothing, the first notes of the vault stand in.
Edit mode reserves the first slot for the note open in the editor.
"""

from __future__ import annotations

import logging
from typing import Any

from wikigraph.domain.context import (
    ContextBuilder,
    assemble_tiers,
    merge_ranked,
    render_active_block,
)
from wikigraph.domain.types import Note
from wikigraph.services.base import BaseService
from wikigraph.services.result import ServiceResult
from wikigraph.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class ContextAssembler(BaseService):
    """Builds chat and edit-mode context strings for one vault."""

    @traced
    def build_context(self, vault_id: str, query: str) -> ServiceResult:
        """Context for a chat turn about *query*."""
        op = "build_context"
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing

        builder = ContextBuilder(self._store.settings.context.max_chars)
        self._fill(builder, vault_id, query)
        return ServiceResult(ok=True, op=op, data=self._payload(builder))

    @traced
    def build_edit_context(
        self,
        vault_id: str,
        query: str,
        active_note_id: str | None = None,
    ) -> ServiceResult:
        """Context for an edit-mode turn.

        The active note, when it resolves within *vault_id*, is rendered
        first and kept out of the ranked and fallback lists. An id that
        does not resolve is ignored.
        """
        op = "build_edit_context"
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing

        builder = ContextBuilder(self._store.settings.context.max_chars)
        active: Note | None = None
        if active_note_id is not None:
            note = self._store.get_note(active_note_id)
            if note is not None and note.vault_id == vault_id:
                active = note
            else:
                logger.debug("active note %s not in vault %s, skipped", active_note_id, vault_id)

        if active is not None:
            builder.add(render_active_block(active), note_id=active.id)

        self._fill(builder, vault_id, query, exclude_id=active.id if active else None)
        data = self._payload(builder)
        data["active_note_title"] = active.title if active else None
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fill(
        self,
        builder: ContextBuilder,
        vault_id: str,
        query: str,
        *,
        exclude_id: str | None = None,
    ) -> None:
        cfg = self._store.settings.context
        exclude = (exclude_id,) if exclude_id else ()

        with trace_span("search") as span:
            ranked = merge_ranked(
                self._store.search_by_title(vault_id, query, cfg.search_limit),
                self._store.search_by_content(vault_id, query, cfg.search_limit),
                exclude_ids=exclude,
            )
            if span:
                span.annotate("ranked", len(ranked))

        if not ranked:
            fallback = self._store.list_notes_by_vault(vault_id, limit=cfg.fallback_notes)
            ranked = [n for n in fallback if n.id != exclude_id]
            logger.debug("no search hits for %r, falling back to %d notes", query, len(ranked))

        with trace_span("render"):
            assemble_tiers(
                builder,
                ranked,
                full_count=cfg.full_content_notes,
                title_only_count=cfg.title_only_notes,
            )
        if builder.closed:
            logger.debug("context budget of %d chars reached", builder.max_chars)

    @staticmethod
    def _payload(builder: ContextBuilder) -> dict[str, Any]:
        return {
            "context": builder.render(),
            "char_count": builder.char_count,
            "budget": builder.max_chars,
            "truncated": builder.closed,
            "note_ids": list(builder.note_ids),
        }
