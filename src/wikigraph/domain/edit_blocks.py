"""Edit/create blocks embedded in AI chat replies.

A reply may carry any number of four-backtick fences::

    ````edit:Note Title
    ...complete replacement content...
    ````

    ````create:New Note
    ...content...
    ````
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

_BLOCK_PATTERN = re.compile(r"````(edit|create):([^\n]+?)\n(.*?)````", re.DOTALL)


class EditKind(StrEnum):
    EDIT = "edit"
    CREATE = "create"


@dataclass(frozen=True)
class EditBlock:
    """One fenced block: full replacement content for *note_title*."""

    kind: EditKind
    note_title: str
    content: str


def parse_edit_blocks(text: str) -> list[EditBlock]:
    """Extract every edit/create block from *text*, in order."""
    return [
        EditBlock(kind=EditKind(m.group(1)), note_title=m.group(2).strip(), content=m.group(3))
        for m in _BLOCK_PATTERN.finditer(text)
    ]


def strip_edit_blocks(text: str) -> str:
    """Remove all edit/create blocks, leaving the prose around them."""
    return _BLOCK_PATTERN.sub("", text).strip()
