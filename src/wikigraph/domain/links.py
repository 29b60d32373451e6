"""Wiki-link parsing and literal link rewriting.

Pure functions, no infrastructure dependencies. Consumed by the backlink
index, the unlinked-mention detector, the rename propagator, and the
link graph.

Link matching for backlinks and renames is deliberately literal: a note
links to ``Title`` when its content contains ``[[Title]]``, ``[[Title|``
or ``[[Title#``. Spans are never tokenized for those checks, so
``[[Daily Log 2]]`` is not a link to ``Daily Log``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# [[inner]]: inner may hold | or # but never a closing bracket.
_WIKILINK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")


@dataclass(frozen=True)
class WikiLinkParts:
    """Parsed inner text of a ``[[...]]`` span.

    At most one of ``alias`` / ``heading`` is set.
    """

    title: str
    alias: str | None = None
    heading: str | None = None


@dataclass(frozen=True)
class LinkSpan:
    """A ``[[...]]`` occurrence in text (``end`` is exclusive)."""

    start: int
    end: int
    inner: str

    @property
    def parts(self) -> WikiLinkParts:
        return parse_link_inner(self.inner)


def parse_link_inner(inner: str) -> WikiLinkParts:
    """Parse the text between ``[[`` and ``]]``.

    The first ``|`` wins outright: ``"A|B#C"`` has alias ``"B#C"`` and no
    heading. ``#`` is only inspected when there is no ``|``. Nothing is
    stripped, and empty input gives an empty title.
    """
    pipe_idx = inner.find("|")
    if pipe_idx != -1:
        return WikiLinkParts(title=inner[:pipe_idx], alias=inner[pipe_idx + 1 :])

    hash_idx = inner.find("#")
    if hash_idx != -1:
        return WikiLinkParts(title=inner[:hash_idx], heading=inner[hash_idx + 1 :])

    return WikiLinkParts(title=inner)


def link_display_text(inner: str) -> str:
    """Text a renderer shows for a link.

    Alias links show the alias, heading links show the full inner text
    (``Title#Heading``), plain links show the title.
    """
    parts = parse_link_inner(inner)
    if parts.alias is not None:
        return parts.alias
    if parts.heading is not None:
        return inner
    return parts.title


def find_wikilink_spans(text: str) -> list[LinkSpan]:
    """Return every ``[[...]]`` span in *text*, left to right, non-overlapping.

    Unterminated or bracket-nested input simply produces no span for that
    region; it is never an error.
    """
    return [
        LinkSpan(start=m.start(), end=m.end(), inner=m.group(1))
        for m in _WIKILINK_PATTERN.finditer(text)
    ]


def outgoing_link_titles(content: str) -> list[str]:
    """Distinct, stripped link titles in *content*, in first-seen order."""
    seen: set[str] = set()
    titles: list[str] = []
    for span in find_wikilink_spans(content):
        title = span.parts.title.strip()
        if title and title not in seen:
            seen.add(title)
            titles.append(title)
    return titles


# ---------------------------------------------------------------------------
# Literal link patterns
# ---------------------------------------------------------------------------


def link_patterns(title: str) -> tuple[str, str, str]:
    """The three literal prefixes that make a link to *title*."""
    return f"[[{title}]]", f"[[{title}|", f"[[{title}#"


def content_has_backlink_to(content: str, title: str) -> bool:
    """True when *content* holds a plain, alias, or heading link to *title*."""
    return any(pattern in content for pattern in link_patterns(title))


def first_backlink_line(content: str, title: str) -> str | None:
    """First line of *content* holding a link to *title* (untrimmed)."""
    patterns = link_patterns(title)
    for line in content.split("\n"):
        if any(pattern in line for pattern in patterns):
            return line
    return None


def apply_wikilink_rename(content: str, old_title: str, new_title: str) -> str:
    """Rewrite every link to *old_title* so it points at *new_title*.

    Three independent replace-all passes, one per link form. Text that
    merely mentions the old title, or links to a longer title that starts
    with it, is left alone.
    """
    result = content
    for find, replace in zip(link_patterns(old_title), link_patterns(new_title), strict=True):
        if find in result:
            result = result.replace(find, replace)
    return result


# ---------------------------------------------------------------------------
# Unlinked mentions
# ---------------------------------------------------------------------------


def is_unlinked_mention(line: str, title: str) -> bool:
    """True when *title* occurs in *line* (any case) outside a ``[[`` span.

    Only the first occurrence is checked. It counts as linked when the
    last ``[[`` before it comes after the last ``]]`` before it.
    """
    title_lower = title.lower()
    idx = line.lower().find(title_lower)
    if idx == -1:
        return False
    before = line[:idx]
    return before.rfind("[[") <= before.rfind("]]")


def find_unlinked_mention_line(content: str, title: str) -> str | None:
    """Trimmed first line that mentions *title*, or None.

    Only the first line containing the title is inspected. If that
    occurrence sits inside a link the whole note yields nothing, even when
    a later line has a plain mention.
    """
    if not title:
        return None
    title_lower = title.lower()
    if title_lower not in content.lower():
        return None
    for line in content.split("\n"):
        if title_lower not in line.lower():
            continue
        if is_unlinked_mention(line, title):
            return line.strip()
        return None
    return None
