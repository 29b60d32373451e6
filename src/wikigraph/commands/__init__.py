"""Subcommand modules for wikigraph.

Provides register_commands() which uses deferred imports to keep
``wikigraph --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from wikigraph.commands.links import links
    from wikigraph.commands.note import note
    from wikigraph.commands.vault import vault

    cli.add_command(vault)
    cli.add_command(note)
    cli.add_command(links)

    # --- Standalone commands ---
    from wikigraph.commands.context import context
    from wikigraph.commands.search import search

    cli.add_command(search)
    cli.add_command(context)
