"""Command group: vault management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikigraph.commands._base import WikiGroup
from wikigraph.services.vaults import VaultService

if TYPE_CHECKING:
    from wikigraph.commands._context import AppContext

_VAULT_EXAMPLES = """\
  wikigraph vault create "Research"
  wikigraph vault list
  wikigraph --json vault list"""


@click.group(cls=WikiGroup, examples=_VAULT_EXAMPLES)
@click.pass_obj
def vault(app: AppContext) -> None:
    """Create and list vaults."""


@vault.command(
    examples="""\
  wikigraph vault create "Research"
  wikigraph -q vault create Journal"""
)
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create a new vault."""
    app.emit(VaultService(app.store).create(name))


@vault.command(
    "list",
    examples="""\
  wikigraph vault list
  wikigraph -q vault list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all vaults."""
    app.emit(VaultService(app.store).list_vaults())
