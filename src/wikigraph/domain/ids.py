"""ID patterns, validation, and generation.

Titles are mutable, so IDs are random rather than derived from the
title. INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import uuid

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "note": re.compile(r"^note_[0-9a-f]{12}$"),
    "vault": re.compile(r"^vlt_[0-9a-f]{12}$"),
}

TYPE_PREFIXES: dict[str, str] = {
    "note": "note_",
    "vault": "vlt_",
}


def generate_id(kind: str) -> str:
    """Return ``{prefix}{12 hex chars}`` for *kind* (``note`` or ``vault``)."""
    return f"{TYPE_PREFIXES[kind]}{uuid.uuid4().hex[:12]}"


def validate_id(value: str, kind: str) -> bool:
    """Check whether *value* matches the expected pattern for *kind*."""
    pattern = ID_PATTERNS.get(kind)
    if pattern is None:
        return False
    return pattern.match(value) is not None
