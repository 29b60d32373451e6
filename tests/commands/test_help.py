"""Parametrized help and --examples tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from wikigraph.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["vault", "note", "links", "search", "context", "--json"]),
    (["vault", "--help"], ["create", "list"]),
    (["note", "--help"], ["create", "show", "list", "edit", "rename", "delete", "apply-edits"]),
    (["note", "create", "--help"], ["VAULT_ID", "TITLE", "--content", "--folder"]),
    (["note", "edit", "--help"], ["--content", "--file", "--vault"]),
    (["note", "rename", "--help"], ["NOTE_ID", "NEW_TITLE", "--vault"]),
    (["links", "--help"], ["backlinks", "mentions", "outgoing", "graph"]),
    (["search", "--help"], ["VAULT_ID", "QUERY", "--limit"]),
    (["context", "--help"], ["VAULT_ID", "QUERY", "--active"]),
]


@pytest.mark.parametrize(("args", "keywords"), HELP_COMMANDS)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["vault", "--examples"],
        ["note", "rename", "--examples"],
        ["links", "backlinks", "--examples"],
        ["search", "--examples"],
        ["context", "--examples"],
    ],
)
def test_examples(cli_runner: CliRunner, args: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    assert "wikigraph" in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "wikigraph" in result.output
