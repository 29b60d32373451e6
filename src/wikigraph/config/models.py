"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, wikigraph.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchConfig(BaseModel):
    """[search] section."""

    model_config = {"frozen": True}

    result_limit: int = Field(default=20, ge=1)


class ContextConfig(BaseModel):
    """[context] section — AI context assembly budget and tiers."""

    model_config = {"frozen": True}

    max_chars: int = Field(default=80_000, ge=0)
    full_content_notes: int = Field(default=5, ge=0)
    title_only_notes: int = Field(default=10, ge=0)
    search_limit: int = Field(default=15, ge=1)
    fallback_notes: int = Field(default=15, ge=0)


class RenameConfig(BaseModel):
    """[rename] section."""

    model_config = {"frozen": True}

    # Wrap link propagation in one transaction instead of one per note.
    atomic: bool = False


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    filename: str = "wikigraph.db"
