"""Shared pytest fixtures and test helpers for wikigraph tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from wikigraph.config.settings import WikiSettings
from wikigraph.infrastructure.store import NoteStore
from wikigraph.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's WIKIGRAPH_* environment out of the tests."""
    monkeypatch.delenv("WIKIGRAPH_CONFIG", raising=False)
    monkeypatch.delenv("WIKIGRAPH_DATA_ROOT", raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """CLI runs with -v turn telemetry on for the whole thread."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store(tmp_path: Path) -> Generator[NoteStore]:
    """Note store backed by a fresh SQLite database in ``tmp_path``."""
    s = NoteStore(WikiSettings.from_cli(data_root=tmp_path))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def vault_id(store: NoteStore) -> str:
    """ID of an empty vault in ``store``."""
    return create_vault(store, "Test Vault")["id"]


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to ``tmp_path`` so the CLI keeps its data there.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_vault(store: NoteStore, name: str) -> dict[str, Any]:
    """Create a vault via VaultService, asserting success."""
    from wikigraph.services.vaults import VaultService

    result = VaultService(store).create(name)
    assert result.ok, result.error
    return result.data


def create_note(store: NoteStore, vault_id: str, title: str, content: str = "") -> dict[str, Any]:
    """Create a note via NoteService, asserting success."""
    from wikigraph.services.notes import NoteService

    result = NoteService(store).create_note(vault_id, title, content=content)
    assert result.ok, result.error
    return result.data


def set_updated_at(store: NoteStore, note_id: str, value: int) -> None:
    """Force a note's ``updated_at`` so later bumps are observable."""
    with store.transaction() as txn:
        txn.patch_note(note_id, updated_at=value)
