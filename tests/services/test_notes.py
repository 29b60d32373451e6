"""Tests for NoteService — lifecycle, rename propagation, edit blocks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tests.conftest import create_note, create_vault, set_updated_at
from wikigraph.config.settings import WikiSettings
from wikigraph.infrastructure.store import NoteNotFoundError, NoteStore, StoreTransaction
from wikigraph.services.links import LinkService
from wikigraph.services.notes import NoteService


def _content(store: NoteStore, note_id: str) -> str:
    note = store.get_note(note_id)
    assert note is not None
    return note.content


def _updated_at(store: NoteStore, note_id: str) -> int:
    note = store.get_note(note_id)
    assert note is not None
    return note.updated_at


class TestCreateNote:
    def test_create_returns_camel_case_note(self, store: NoteStore, vault_id: str) -> None:
        result = NoteService(store).create_note(vault_id, "Alpha", content="body")
        assert result.ok
        assert result.data["title"] == "Alpha"
        assert result.data["vaultId"] == vault_id
        assert result.data["content"] == "body"
        assert result.data["order"] == 0
        assert result.data["createdAt"] == result.data["updatedAt"] > 0

    def test_empty_title_rejected(self, store: NoteStore, vault_id: str) -> None:
        result = NoteService(store).create_note(vault_id, "   ")
        assert result.error is not None
        assert result.error.code == "EMPTY_TITLE"
        assert store.list_notes_by_vault(vault_id) == []

    def test_missing_vault(self, store: NoteStore) -> None:
        result = NoteService(store).create_note("vlt_000000000000", "Alpha")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestReadUpdateDelete:
    def test_get(self, store: NoteStore, vault_id: str) -> None:
        note = create_note(store, vault_id, "Alpha", "hello")
        result = NoteService(store).get(note["id"])
        assert result.ok
        assert result.data["content"] == "hello"

    def test_list_notes_in_storage_order(self, store: NoteStore, vault_id: str) -> None:
        ids = [create_note(store, vault_id, t)["id"] for t in ("Zeta", "Alpha")]
        result = NoteService(store).list_notes(vault_id)
        assert [item["id"] for item in result.data["items"]] == ids
        assert result.data["count"] == 2

    def test_update_content_bumps_updated_at(self, store: NoteStore, vault_id: str) -> None:
        note = create_note(store, vault_id, "Alpha", "old")
        set_updated_at(store, note["id"], 0)

        result = NoteService(store).update_content(note["id"], "new")
        assert result.ok
        assert result.data["changed"] is True
        assert _content(store, note["id"]) == "new"
        assert _updated_at(store, note["id"]) == result.data["updatedAt"] > 0

    def test_update_respects_vault_scope(self, store: NoteStore, vault_id: str) -> None:
        other = create_vault(store, "Other")
        note = create_note(store, other["id"], "Elsewhere", "keep")
        result = NoteService(store).update_content(note["id"], "lost", vault_id)
        assert result.error is not None
        assert result.error.code == "VAULT_MISMATCH"
        assert _content(store, note["id"]) == "keep"

    def test_delete_leaves_links_in_place(self, store: NoteStore, vault_id: str) -> None:
        target = create_note(store, vault_id, "Target")
        source = create_note(store, vault_id, "Source", "see [[Target]]")

        result = NoteService(store).delete(target["id"])
        assert result.ok
        assert store.get_note(target["id"]) is None
        assert _content(store, source["id"]) == "see [[Target]]"
        error = NoteService(store).get(target["id"]).error
        assert error is not None
        assert error.code == "NOT_FOUND"


class TestRename:
    def test_rewrites_all_link_forms(self, store: NoteStore, vault_id: str) -> None:
        foo = create_note(store, vault_id, "Foo")
        b = create_note(store, vault_id, "B", "[[Foo]] and [[Foo|alias]] and [[Foo#H]]")

        result = NoteService(store).rename(foo["id"], "Baz", vault_id)
        assert result.ok
        assert _content(store, b["id"]) == "[[Baz]] and [[Baz|alias]] and [[Baz#H]]"
        assert result.data["updated"] == [b["id"]]
        assert result.data["count"] == 1
        assert result.data["old_title"] == "Foo"
        assert result.data["new_title"] == "Baz"

    def test_unaffected_notes_keep_updated_at(self, store: NoteStore, vault_id: str) -> None:
        foo = create_note(store, vault_id, "Foo")
        linked = create_note(store, vault_id, "Linked", "[[Foo]]")
        mention = create_note(store, vault_id, "Mention", "Foo in plain text, [[Food]]")
        blank = create_note(store, vault_id, "Blank")
        for note in (linked, mention, blank):
            set_updated_at(store, note["id"], 0)

        NoteService(store).rename(foo["id"], "Bar")

        assert _updated_at(store, linked["id"]) > 0
        assert _updated_at(store, mention["id"]) == 0
        assert _updated_at(store, blank["id"]) == 0
        assert _content(store, mention["id"]) == "Foo in plain text, [[Food]]"

    def test_weekly_review_scenario(self, store: NoteStore, vault_id: str) -> None:
        daily = create_note(store, vault_id, "Daily Log", "Link: [[Review]]")
        review = create_note(store, vault_id, "Review", "See [[Daily Log]] today.")
        set_updated_at(store, daily["id"], 0)

        result = NoteService(store).rename(review["id"], "Weekly Review")
        assert result.ok

        renamed = store.get_note(review["id"])
        assert renamed is not None
        assert renamed.title == "Weekly Review"
        assert _content(store, daily["id"]) == "Link: [[Weekly Review]]"
        assert _updated_at(store, daily["id"]) > 0

    def test_backlinks_follow_the_rename(self, store: NoteStore, vault_id: str) -> None:
        foo = create_note(store, vault_id, "Foo")
        b = create_note(store, vault_id, "B", "[[Foo]]")
        NoteService(store).rename(foo["id"], "Bar")

        result = LinkService(store).backlinks(foo["id"])
        assert [item["noteId"] for item in result.data["items"]] == [b["id"]]

    def test_same_title_persists_without_propagation(
        self, store: NoteStore, vault_id: str
    ) -> None:
        foo = create_note(store, vault_id, "Foo")
        b = create_note(store, vault_id, "B", "[[Foo]]")
        set_updated_at(store, b["id"], 0)

        result = NoteService(store).rename(foo["id"], "Foo")
        assert result.ok
        assert result.data["count"] == 0
        assert _updated_at(store, b["id"]) == 0

    def test_other_vaults_untouched(self, store: NoteStore, vault_id: str) -> None:
        foo = create_note(store, vault_id, "Foo")
        other = create_vault(store, "Other")
        foreign = create_note(store, other["id"], "Foreign", "[[Foo]]")

        NoteService(store).rename(foo["id"], "Bar")
        assert _content(store, foreign["id"]) == "[[Foo]]"

    def test_target_self_links_untouched(self, store: NoteStore, vault_id: str) -> None:
        foo = create_note(store, vault_id, "Foo", "I am [[Foo]]")
        NoteService(store).rename(foo["id"], "Bar")
        assert _content(store, foo["id"]) == "I am [[Foo]]"

    def test_empty_title_rejected_before_any_write(
        self, store: NoteStore, vault_id: str
    ) -> None:
        foo = create_note(store, vault_id, "Foo")
        result = NoteService(store).rename(foo["id"], "  ")
        assert result.error is not None
        assert result.error.code == "EMPTY_TITLE"
        note = store.get_note(foo["id"])
        assert note is not None
        assert note.title == "Foo"

    def test_scope_checked_before_any_write(self, store: NoteStore, vault_id: str) -> None:
        other = create_vault(store, "Other")
        foo = create_note(store, other["id"], "Foo")
        result = NoteService(store).rename(foo["id"], "Bar", vault_id)
        assert result.error is not None
        assert result.error.code == "VAULT_MISMATCH"
        note = store.get_note(foo["id"])
        assert note is not None
        assert note.title == "Foo"

    def test_missing_note(self, store: NoteStore) -> None:
        result = NoteService(store).rename("note_000000000000", "Bar")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


def _fail_content_patch_for(monkeypatch: pytest.MonkeyPatch, failing_id: str) -> None:
    original = StoreTransaction.patch_note

    def flaky(self: StoreTransaction, note_id: str, **fields: Any) -> None:
        if note_id == failing_id and "content" in fields:
            raise NoteNotFoundError(note_id)
        original(self, note_id, **fields)

    monkeypatch.setattr(StoreTransaction, "patch_note", flaky)


class TestRenameFailure:
    def test_non_atomic_stops_and_keeps_earlier_writes(
        self, store: NoteStore, vault_id: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        foo = create_note(store, vault_id, "Foo")
        first = create_note(store, vault_id, "First", "[[Foo]]")
        second = create_note(store, vault_id, "Second", "[[Foo]]")
        third = create_note(store, vault_id, "Third", "[[Foo]]")
        _fail_content_patch_for(monkeypatch, second["id"])

        result = NoteService(store).rename(foo["id"], "Bar")

        assert not result.ok
        assert result.error is not None
        assert result.error.code == "PROPAGATION_FAILED"
        assert result.error.detail["updated"] == [first["id"]]
        assert _content(store, first["id"]) == "[[Bar]]"
        assert _content(store, second["id"]) == "[[Foo]]"
        assert _content(store, third["id"]) == "[[Foo]]"
        renamed = store.get_note(foo["id"])
        assert renamed is not None
        assert renamed.title == "Bar"

    def test_atomic_rolls_back_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store = NoteStore(WikiSettings.from_cli(data_root=tmp_path, rename={"atomic": True}))
        try:
            vault_id = create_vault(store, "V")["id"]
            foo = create_note(store, vault_id, "Foo")
            first = create_note(store, vault_id, "First", "[[Foo]]")
            second = create_note(store, vault_id, "Second", "[[Foo]]")
            _fail_content_patch_for(monkeypatch, second["id"])

            result = NoteService(store).rename(foo["id"], "Bar")

            assert result.error is not None
            assert result.error.code == "PROPAGATION_FAILED"
            assert result.error.detail["updated"] == []
            assert _content(store, first["id"]) == "[[Foo]]"
            note = store.get_note(foo["id"])
            assert note is not None
            assert note.title == "Foo"
        finally:
            store.close()

    def test_atomic_success(self, tmp_path: Path) -> None:
        store = NoteStore(WikiSettings.from_cli(data_root=tmp_path, rename={"atomic": True}))
        try:
            vault_id = create_vault(store, "V")["id"]
            foo = create_note(store, vault_id, "Foo")
            first = create_note(store, vault_id, "First", "[[Foo|f]]")

            result = NoteService(store).rename(foo["id"], "Bar")
            assert result.ok
            assert result.data["updated"] == [first["id"]]
            assert _content(store, first["id"]) == "[[Bar|f]]"
        finally:
            store.close()


REPLY = """Sure, here you go.

````edit:alpha
Rewritten alpha
````

````create:Brand New
Created body
````

````edit:Nobody
ignored
````
"""


class TestApplyEditBlocks:
    def test_edit_create_and_missing(self, store: NoteStore, vault_id: str) -> None:
        alpha = create_note(store, vault_id, "Alpha", "original")

        result = NoteService(store).apply_edit_blocks(vault_id, REPLY)

        assert result.ok
        assert result.data["blocks"] == 3
        assert result.data["count"] == 2
        assert _content(store, alpha["id"]) == "Rewritten alpha\n"

        created = [n for n in store.list_notes_by_vault(vault_id) if n.title == "Brand New"]
        assert len(created) == 1
        assert created[0].content == "Created body\n"
        assert result.warnings == ["No note titled 'Nobody' to edit"]
        assert result.data["prose"] == "Sure, here you go."

    def test_no_blocks(self, store: NoteStore, vault_id: str) -> None:
        result = NoteService(store).apply_edit_blocks(vault_id, "plain reply")
        assert result.ok
        assert result.data["count"] == 0
        assert result.warnings == []
