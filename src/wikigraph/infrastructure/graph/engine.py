"""GraphEngine — lazy-built NetworkX link graph per vault.

Nodes are notes; a directed edge ``a -> b`` exists when ``a`` holds a
wiki-link whose parsed title equals ``b``'s title, compared
case-insensitively. Self links and links to missing titles are dropped.
Graphs are cached per vault until the next store transaction ends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from wikigraph.domain.links import outgoing_link_titles

if TYPE_CHECKING:
    from wikigraph.domain.types import Note
    from wikigraph.infrastructure.store import NoteStore

_Graph = nx.DiGraph


def build_link_graph(corpus: list[Note]) -> _Graph:
    """Build the directed link graph for one vault's notes.

    When two notes share a title (ignoring case) the later one wins
    resolution.
    """
    g: _Graph = nx.DiGraph()
    by_title: dict[str, str] = {}
    for note in corpus:
        # Add all nodes first so isolated notes are visible to algorithms
        g.add_node(note.id, title=note.title)
        by_title[note.title.lower()] = note.id

    for note in corpus:
        for title in outgoing_link_titles(note.content):
            target_id = by_title.get(title.lower())
            if target_id is None or target_id == note.id:
                continue
            g.add_edge(note.id, target_id)
    return g


class GraphEngine:
    """Lazy-loading graph engine backed by the note store."""

    def __init__(self, store: NoteStore) -> None:
        self._store = store
        self._graphs: dict[str, _Graph] = {}

    def graph(self, vault_id: str) -> _Graph:
        """Return the vault's graph, building it on first access."""
        if vault_id not in self._graphs:
            self._graphs[vault_id] = build_link_graph(self._store.list_notes_by_vault(vault_id))
        return self._graphs[vault_id]

    def invalidate(self) -> None:
        """Clear every cached graph, forcing rebuild on next access."""
        self._graphs.clear()
