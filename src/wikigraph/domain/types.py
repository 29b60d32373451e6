"""Note and derived link-record models.

Notes are owned by the document store; the domain only reads them.
All models serialize with camelCase aliases (``noteId``, ``updatedAt``)
because that is the shape API consumers expect.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Vault(BaseModel):
    """Top-level container; every graph operation is scoped to one vault."""

    model_config = _MODEL_CONFIG

    id: str
    name: str
    created_at: int


class Note(BaseModel):
    """A markdown note. ``updated_at`` is epoch milliseconds."""

    model_config = _MODEL_CONFIG

    id: str
    vault_id: str
    title: str
    content: str = ""
    folder_id: str | None = None
    order: int = 0
    created_at: int = 0
    updated_at: int = 0


class Backlink(BaseModel):
    """A note that links to the target, with its first linking line."""

    model_config = _MODEL_CONFIG

    note_id: str
    note_title: str
    context: str


class UnlinkedMention(BaseModel):
    """A note that mentions the target's title without linking it."""

    model_config = _MODEL_CONFIG

    note_id: str
    note_title: str
    context: str
