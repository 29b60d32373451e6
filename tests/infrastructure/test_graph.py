"""Tests for the link graph builder and its cache."""

from __future__ import annotations

from wikigraph.domain.types import Note
from wikigraph.infrastructure.graph.engine import build_link_graph
from wikigraph.infrastructure.store import NoteStore


def _note(note_id: str, title: str, content: str = "") -> Note:
    return Note(id=note_id, vault_id="vlt_000000000000", title=title, content=content)


class TestBuildLinkGraph:
    def test_edges_resolve_case_insensitively(self) -> None:
        g = build_link_graph([_note("a", "Alpha", "[[beta]]"), _note("b", "Beta")])
        assert list(g.edges()) == [("a", "b")]

    def test_alias_and_heading_links_resolve(self) -> None:
        g = build_link_graph(
            [_note("a", "Alpha", "[[Beta|b]] [[Gamma#x]]"), _note("b", "Beta"), _note("c", "Gamma")]
        )
        assert set(g.edges()) == {("a", "b"), ("a", "c")}

    def test_self_and_unresolved_links_dropped(self) -> None:
        g = build_link_graph([_note("a", "Alpha", "[[Alpha]] [[Nowhere]]")])
        assert g.number_of_edges() == 0
        assert list(g.nodes()) == ["a"]

    def test_duplicate_titles_last_wins(self) -> None:
        g = build_link_graph(
            [_note("a", "Alpha", "[[Dup]]"), _note("d1", "Dup"), _note("d2", "dup")]
        )
        assert list(g.edges()) == [("a", "d2")]

    def test_isolated_nodes_kept_with_titles(self) -> None:
        g = build_link_graph([_note("a", "Alpha"), _note("b", "Beta")])
        assert g.nodes["b"]["title"] == "Beta"


class TestGraphEngine:
    def test_cache_invalidated_by_transaction(self, store: NoteStore, vault_id: str) -> None:
        with store.transaction() as txn:
            a = txn.insert_note(vault_id, "Alpha", created_at=1)
            txn.insert_note(vault_id, "Beta", created_at=1)

        first = store.graph.graph(vault_id)
        assert store.graph.graph(vault_id) is first
        assert first.number_of_edges() == 0

        with store.transaction() as txn:
            txn.patch_note(a.id, content="[[Beta]]")

        rebuilt = store.graph.graph(vault_id)
        assert rebuilt is not first
        assert rebuilt.number_of_edges() == 1
