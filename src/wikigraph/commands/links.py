"""Command group: backlinks, unlinked mentions, outgoing links and graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikigraph.commands._base import WikiGroup
from wikigraph.services.links import LinkService

if TYPE_CHECKING:
    from wikigraph.commands._context import AppContext

_LINKS_EXAMPLES = """\
  wikigraph links backlinks note_0123456789ab
  wikigraph links mentions note_0123456789ab
  wikigraph links outgoing note_0123456789ab
  wikigraph links graph vlt_0123456789ab"""

_vault_option = click.option(
    "--vault",
    "vault_id",
    default=None,
    help="Require the note to belong to this vault.",
)


@click.group(cls=WikiGroup, examples=_LINKS_EXAMPLES)
@click.pass_obj
def links(app: AppContext) -> None:
    """Explore the wiki-link graph."""


@links.command(
    examples="""\
  wikigraph links backlinks note_0123456789ab
  wikigraph --json links backlinks note_0123456789ab --vault vlt_0123456789ab"""
)
@click.argument("note_id")
@_vault_option
@click.pass_obj
def backlinks(app: AppContext, note_id: str, vault_id: str | None) -> None:
    """List notes that link to a note."""
    app.emit(LinkService(app.store).backlinks(note_id, vault_id))


@links.command(
    examples="""\
  wikigraph links mentions note_0123456789ab
  wikigraph -q links mentions note_0123456789ab"""
)
@click.argument("note_id")
@_vault_option
@click.pass_obj
def mentions(app: AppContext, note_id: str, vault_id: str | None) -> None:
    """List notes that mention a note's title without linking it."""
    app.emit(LinkService(app.store).unlinked_mentions(note_id, vault_id))


@links.command(
    examples="""\
  wikigraph links outgoing note_0123456789ab"""
)
@click.argument("note_id")
@_vault_option
@click.pass_obj
def outgoing(app: AppContext, note_id: str, vault_id: str | None) -> None:
    """List the links a note makes, resolved against its vault."""
    app.emit(LinkService(app.store).outgoing(note_id, vault_id))


@links.command(
    examples="""\
  wikigraph links graph vlt_0123456789ab
  wikigraph --json links graph vlt_0123456789ab > graph.json"""
)
@click.argument("vault_id")
@click.pass_obj
def graph(app: AppContext, vault_id: str) -> None:
    """Emit the vault's node/link graph."""
    app.emit(LinkService(app.store).graph(vault_id))
