"""Command: assemble AI chat context for a message."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikigraph.commands._base import WikiCommand

if TYPE_CHECKING:
    from wikigraph.commands._context import AppContext


@click.command(
    cls=WikiCommand,
    examples="""\
  wikigraph context vlt_0123456789ab "what did I write about graphs?"
  wikigraph context vlt_0123456789ab "tighten this" --active note_0123456789ab
  wikigraph -q context vlt_0123456789ab "summarize" > context.md""",
)
@click.argument("vault_id")
@click.argument("query")
@click.option(
    "--active",
    "active_note_id",
    default=None,
    help="Edit mode: the note open in the editor goes first.",
)
@click.pass_obj
def context(app: AppContext, vault_id: str, query: str, active_note_id: str | None) -> None:
    """Build the budgeted note context for an AI chat turn."""
    from wikigraph.services.context import ContextAssembler

    assembler = ContextAssembler(app.store)
    if active_note_id is None:
        app.emit(assembler.build_context(vault_id, query))
    else:
        app.emit(assembler.build_edit_context(vault_id, query, active_note_id))
