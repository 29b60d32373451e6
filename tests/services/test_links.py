"""Tests for LinkService — backlinks, mentions, outgoing links and graph."""

from __future__ import annotations

from tests.conftest import create_note, create_vault
from wikigraph.infrastructure.store import NoteStore
from wikigraph.services.links import LinkService


class TestBacklinks:
    def test_lists_linking_notes(self, store: NoteStore, vault_id: str) -> None:
        alpha = create_note(store, vault_id, "Alpha", "I link to myself: [[Alpha]]")
        beta = create_note(store, vault_id, "Beta", "intro\nsee [[Alpha|the first]]")
        create_note(store, vault_id, "Gamma", "mentions Alpha without a link")

        result = LinkService(store).backlinks(alpha["id"], vault_id)
        assert result.ok
        assert result.data["count"] == 1
        assert result.data["items"] == [
            {"noteId": beta["id"], "noteTitle": "Beta", "context": "see [[Alpha|the first]]"}
        ]

    def test_other_vaults_are_not_scanned(self, store: NoteStore, vault_id: str) -> None:
        alpha = create_note(store, vault_id, "Alpha")
        other = create_vault(store, "Other")
        create_note(store, other["id"], "Foreign", "[[Alpha]]")

        result = LinkService(store).backlinks(alpha["id"])
        assert result.data["count"] == 0

    def test_missing_note(self, store: NoteStore) -> None:
        result = LinkService(store).backlinks("note_000000000000")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_vault_mismatch(self, store: NoteStore, vault_id: str) -> None:
        other = create_vault(store, "Other")
        note = create_note(store, other["id"], "Elsewhere")
        result = LinkService(store).backlinks(note["id"], vault_id)
        assert result.error is not None
        assert result.error.code == "VAULT_MISMATCH"


class TestUnlinkedMentions:
    def test_excludes_linked_and_self(self, store: NoteStore, vault_id: str) -> None:
        alpha = create_note(store, vault_id, "Alpha", "Alpha talks about Alpha")
        create_note(store, vault_id, "Beta", "[[Alpha]] is linked")
        gamma = create_note(store, vault_id, "Gamma", "line one\n  we should read alpha  ")

        result = LinkService(store).unlinked_mentions(alpha["id"], vault_id)
        assert result.ok
        assert result.data["items"] == [
            {"noteId": gamma["id"], "noteTitle": "Gamma", "context": "we should read alpha"}
        ]


class TestOutgoing:
    def test_resolved_and_unresolved(self, store: NoteStore, vault_id: str) -> None:
        beta = create_note(store, vault_id, "Beta")
        alpha = create_note(store, vault_id, "Alpha", "[[beta|b]] and [[Missing]] and [[Beta]]")

        result = LinkService(store).outgoing(alpha["id"])
        assert result.ok
        # Titles are de-duplicated exactly, so both spellings resolve to Beta
        assert result.data["items"] == [
            {"title": "beta", "noteId": beta["id"], "noteTitle": "Beta"},
            {"title": "Beta", "noteId": beta["id"], "noteTitle": "Beta"},
        ]
        assert result.data["unresolved"] == ["Missing"]
        assert result.data["count"] == 3


class TestGraph:
    def test_nodes_and_undirected_links(self, store: NoteStore, vault_id: str) -> None:
        a = create_note(store, vault_id, "A", "[[B]] [[C]] [[A]]")
        b = create_note(store, vault_id, "B", "[[A]]")
        c = create_note(store, vault_id, "C")
        d = create_note(store, vault_id, "D", "[[Nowhere]]")

        result = LinkService(store).graph(vault_id)
        assert result.ok
        counts = {n["id"]: n["linkCount"] for n in result.data["nodes"]}
        assert counts == {a["id"]: 2, b["id"]: 1, c["id"]: 1, d["id"]: 0}

        pairs = {frozenset((lnk["source"], lnk["target"])) for lnk in result.data["links"]}
        assert pairs == {frozenset((a["id"], b["id"])), frozenset((a["id"], c["id"]))}
        assert len(result.data["links"]) == 2

    def test_missing_vault(self, store: NoteStore) -> None:
        result = LinkService(store).graph("vlt_000000000000")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
