"""Ranked merge and character-budgeted rendering of AI context.

The tiering is a token-budget heuristic: the first few ranked notes are
rendered in full, the next batch by title only. Blocks are appended
whole; the first block that does not fit ends assembly, so callers must
never assume the context is complete.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from wikigraph.domain.types import Note

MAX_CONTEXT_CHARS = 80_000
FULL_CONTENT_NOTES = 5
TITLE_ONLY_NOTES = 10
CONTEXT_SEARCH_LIMIT = 15
API_SEARCH_LIMIT = 20

BLOCK_SEPARATOR = "\n\n---\n\n"


def merge_ranked(
    title_hits: Iterable[Note],
    content_hits: Iterable[Note],
    *,
    exclude_ids: Iterable[str] = (),
) -> list[Note]:
    """Title hits then content hits, de-duplicated by id (first seen wins)."""
    seen: set[str] = set(exclude_ids)
    ranked: list[Note] = []
    for hits in (title_hits, content_hits):
        for note in hits:
            if note.id in seen:
                continue
            seen.add(note.id)
            ranked.append(note)
    return ranked


def render_full_block(note: Note) -> str:
    return f"## {note.title}\n\n{note.content}{BLOCK_SEPARATOR}"


def render_title_block(note: Note) -> str:
    return f"## {note.title} (title only){BLOCK_SEPARATOR}"


def render_active_block(note: Note) -> str:
    return (
        f"## ACTIVE NOTE: {note.title}\n"
        "(This is the note currently open in the editor)\n\n"
        f"{note.content}{BLOCK_SEPARATOR}"
    )


class ContextBuilder:
    """Accumulates rendered blocks under a hard character budget.

    Once a block is refused the builder is closed and refuses everything
    after it, including blocks that would fit on their own.
    """

    def __init__(self, max_chars: int = MAX_CONTEXT_CHARS) -> None:
        self.max_chars = max_chars
        self._blocks: list[str] = []
        self._char_count = 0
        self._closed = False
        self.note_ids: list[str] = []

    @property
    def char_count(self) -> int:
        return self._char_count

    @property
    def closed(self) -> bool:
        """True once a block has been refused for lack of budget."""
        return self._closed

    def add(self, block: str, *, note_id: str | None = None) -> bool:
        """Append *block* if it fits. Returns whether it was added."""
        if self._closed:
            return False
        if self._char_count + len(block) > self.max_chars:
            self._closed = True
            return False
        self._blocks.append(block)
        self._char_count += len(block)
        if note_id is not None:
            self.note_ids.append(note_id)
        return True

    def render(self) -> str:
        return "".join(self._blocks)


def assemble_tiers(
    builder: ContextBuilder,
    ranked: Sequence[Note],
    *,
    full_count: int = FULL_CONTENT_NOTES,
    title_only_count: int = TITLE_ONLY_NOTES,
) -> None:
    """Render tier 1 (full content) then tier 2 (title only) into *builder*."""
    for note in ranked[:full_count]:
        if not builder.add(render_full_block(note), note_id=note.id):
            return
    for note in ranked[full_count : full_count + title_only_count]:
        if not builder.add(render_title_block(note), note_id=note.id):
            return
