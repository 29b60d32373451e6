"""LinkService — backlinks, unlinked mentions, outgoing links, graph view.

Every query is computed on demand from the current vault corpus; there is
no persisted backlink table to drift out of date.
"""

from __future__ import annotations

from typing import Any

from wikigraph.domain.backlinks import get_backlinks, get_unlinked_mentions
from wikigraph.domain.links import outgoing_link_titles
from wikigraph.domain.types import Note
from wikigraph.services._helpers import dump_items
from wikigraph.services.base import BaseService
from wikigraph.services.result import ServiceResult
from wikigraph.services.telemetry import trace_span, traced


class LinkService(BaseService):
    """Handles link-derived queries for one note or one vault."""

    @traced
    def backlinks(self, note_id: str, vault_id: str | None = None) -> ServiceResult:
        """Notes in the same vault whose content links to *note_id*'s title."""
        op = "backlinks"
        target = self._resolve_note(op, note_id, vault_id)
        if not isinstance(target, Note):
            return target

        with trace_span("scan_corpus") as span:
            corpus = self._store.list_notes_by_vault(target.vault_id)
            items = get_backlinks(corpus, target.title, exclude_id=target.id)
            if span:
                span.annotate("corpus_size", len(corpus))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": target.id,
                "title": target.title,
                "count": len(items),
                "items": dump_items(items),
            },
        )

    @traced
    def unlinked_mentions(self, note_id: str, vault_id: str | None = None) -> ServiceResult:
        """Notes that mention *note_id*'s title without linking to it."""
        op = "unlinked_mentions"
        target = self._resolve_note(op, note_id, vault_id)
        if not isinstance(target, Note):
            return target

        with trace_span("scan_corpus") as span:
            corpus = self._store.list_notes_by_vault(target.vault_id)
            items = get_unlinked_mentions(corpus, target.title, exclude_id=target.id)
            if span:
                span.annotate("corpus_size", len(corpus))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": target.id,
                "title": target.title,
                "count": len(items),
                "items": dump_items(items),
            },
        )

    @traced
    def outgoing(self, note_id: str, vault_id: str | None = None) -> ServiceResult:
        """Links found in *note_id*'s content, split into resolved and unresolved.

        Titles resolve case-insensitively against the vault; when two notes
        share a title the later one wins, matching the graph view.
        """
        op = "outgoing"
        source = self._resolve_note(op, note_id, vault_id)
        if not isinstance(source, Note):
            return source

        by_title = {n.title.lower(): n for n in self._store.list_notes_by_vault(source.vault_id)}
        resolved: list[dict[str, Any]] = []
        unresolved: list[str] = []
        for title in outgoing_link_titles(source.content):
            target = by_title.get(title.lower())
            if target is None:
                unresolved.append(title)
            else:
                resolved.append({"title": title, "noteId": target.id, "noteTitle": target.title})

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": source.id,
                "count": len(resolved) + len(unresolved),
                "items": resolved,
                "unresolved": unresolved,
            },
        )

    @traced
    def graph(self, vault_id: str) -> ServiceResult:
        """Node/link payload for a force-directed view of the vault.

        Links are undirected: ``a -> b`` and ``b -> a`` collapse into one
        pair. ``linkCount`` is the number of distinct neighbours.
        """
        op = "graph"
        missing = self._require_vault(op, vault_id)
        if missing is not None:
            return missing

        g = self._store.graph.graph(vault_id)
        undirected = g.to_undirected(as_view=True)

        nodes = [
            {"id": node_id, "title": attrs["title"], "linkCount": undirected.degree(node_id)}
            for node_id, attrs in g.nodes(data=True)
        ]
        links: list[dict[str, str]] = []
        seen: set[frozenset[str]] = set()
        for source, target in g.edges():
            pair = frozenset((source, target))
            if pair in seen:
                continue
            seen.add(pair)
            links.append({"source": source, "target": target})

        return ServiceResult(
            ok=True,
            op=op,
            data={"vault_id": vault_id, "nodes": nodes, "links": links},
        )
