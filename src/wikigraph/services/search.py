"""SearchService — ranked note search over titles and content.

Title matches rank above content matches. Each index is asked for up to
*limit* hits; the merged list is de-duplicated by note id and cut back
to *limit*.
"""

from __future__ import annotations

import logging

from wikigraph.domain.context import merge_ranked
from wikigraph.services._helpers import dump_items
from wikigraph.services.base import BaseService
from wikigraph.services.result import ServiceResult
from wikigraph.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class SearchService(BaseService):
    """Handles full-text note search within one vault."""

    @traced
    def search(self, vault_id: str, query: str, limit: int | None = None) -> ServiceResult:
        """Return full notes matching *query*, title hits first.

        A blank query returns no results without touching the index.
        """
        op = "search"
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing

        if limit is None:
            limit = self._store.settings.search.result_limit
        if not query.strip():
            return ServiceResult(ok=True, op=op, data={"query": query, "count": 0, "items": []})

        with trace_span("fts_title"):
            title_hits = self._store.search_by_title(vault_id, query, limit)
        with trace_span("fts_content"):
            content_hits = self._store.search_by_content(vault_id, query, limit)
        ranked = merge_ranked(title_hits, content_hits)[:limit]

        logger.debug(
            "search %r: %d title hits, %d content hits, %d merged",
            query,
            len(title_hits),
            len(content_hits),
            len(ranked),
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"query": query, "count": len(ranked), "items": dump_items(ranked)},
        )
