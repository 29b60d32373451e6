"""Shared service-layer helper functions."""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel


def now_ms() -> int:
    """Current time as epoch milliseconds (the ``updated_at`` unit)."""
    return time.time_ns() // 1_000_000


def dump_items(items: list[BaseModel]) -> list[dict[str, Any]]:
    """Serialize models for a result payload, using their camelCase aliases."""
    return [item.model_dump(by_alias=True) for item in items]
