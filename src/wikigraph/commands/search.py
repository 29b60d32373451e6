"""Command: search notes by title and content."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikigraph.commands._base import WikiCommand

if TYPE_CHECKING:
    from wikigraph.commands._context import AppContext


@click.command(
    cls=WikiCommand,
    examples="""\
  wikigraph search vlt_0123456789ab "graph theory"
  wikigraph search vlt_0123456789ab zettel --limit 5
  wikigraph --json search vlt_0123456789ab "link"
  wikigraph -q search vlt_0123456789ab draft""",
)
@click.argument("vault_id")
@click.argument("query")
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Max results.")
@click.pass_obj
def search(app: AppContext, vault_id: str, query: str, limit: int | None) -> None:
    """Search a vault; title matches rank above content matches."""
    from wikigraph.services.search import SearchService

    app.emit(SearchService(app.store).search(vault_id, query, limit))
