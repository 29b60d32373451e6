"""On-demand backlink index and unlinked-mention detector.

Both scans take a corpus snapshot (any iterable of notes, usually one
vault) and report at most one entry per source note, in corpus order.
"""

from __future__ import annotations

from collections.abc import Iterable

from wikigraph.domain.links import (
    content_has_backlink_to,
    find_unlinked_mention_line,
    first_backlink_line,
)
from wikigraph.domain.types import Backlink, Note, UnlinkedMention


def get_backlinks(
    corpus: Iterable[Note],
    target_title: str,
    exclude_id: str | None = None,
) -> list[Backlink]:
    """Notes whose content links to *target_title*.

    ``context`` is the first line holding a link. The empty-string
    fallback only triggers if the whole-content and per-line checks ever
    disagree.
    """
    results: list[Backlink] = []
    for note in corpus:
        if note.id == exclude_id:
            continue
        if not content_has_backlink_to(note.content, target_title):
            continue
        line = first_backlink_line(note.content, target_title)
        results.append(Backlink(note_id=note.id, note_title=note.title, context=line or ""))
    return results


def get_unlinked_mentions(
    corpus: Iterable[Note],
    target_title: str,
    exclude_id: str | None = None,
) -> list[UnlinkedMention]:
    """Notes that mention *target_title* in plain text (case-insensitive)."""
    if not target_title:
        return []

    results: list[UnlinkedMention] = []
    for note in corpus:
        if note.id == exclude_id:
            continue
        line = find_unlinked_mention_line(note.content, target_title)
        if line is None:
            continue
        results.append(UnlinkedMention(note_id=note.id, note_title=note.title, context=line))
    return results
