"""Tests for edit/create block parsing."""

from __future__ import annotations

from wikigraph.domain.edit_blocks import EditBlock, EditKind, parse_edit_blocks, strip_edit_blocks

REPLY = """Here are the changes.

````edit:Alpha
New alpha body
with [[Beta]]
````

And a new note:

````create: Gamma 
Fresh content
````
Done."""


class TestParseEditBlocks:
    def test_parses_blocks_in_order(self) -> None:
        blocks = parse_edit_blocks(REPLY)
        assert blocks == [
            EditBlock(
                kind=EditKind.EDIT,
                note_title="Alpha",
                content="New alpha body\nwith [[Beta]]\n",
            ),
            EditBlock(kind=EditKind.CREATE, note_title="Gamma", content="Fresh content\n"),
        ]

    def test_no_blocks(self) -> None:
        assert parse_edit_blocks("just prose, ```code``` too") == []

    def test_unknown_kind_is_ignored(self) -> None:
        assert parse_edit_blocks("````delete:Alpha\nbody\n````") == []

    def test_title_never_spans_lines(self) -> None:
        assert parse_edit_blocks("````edit:\nbody\n````") == []


class TestStripEditBlocks:
    def test_keeps_surrounding_prose(self) -> None:
        stripped = strip_edit_blocks(REPLY)
        assert "````" not in stripped
        assert stripped.startswith("Here are the changes.")
        assert stripped.endswith("Done.")
