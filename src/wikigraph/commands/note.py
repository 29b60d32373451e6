"""Command group: note lifecycle, rename propagation and edit blocks."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from wikigraph.commands._base import WikiGroup
from wikigraph.services.notes import NoteService

if TYPE_CHECKING:
    from wikigraph.commands._context import AppContext

_NOTE_EXAMPLES = """\
  wikigraph note create vlt_0123456789ab "Alpha"
  wikigraph note show note_0123456789ab
  wikigraph note list vlt_0123456789ab
  wikigraph note edit note_0123456789ab --content "See [[Beta]]"
  wikigraph note rename note_0123456789ab "Alpha Prime"
  wikigraph note delete note_0123456789ab
  wikigraph note apply-edits vlt_0123456789ab reply.md"""

_vault_option = click.option(
    "--vault",
    "vault_id",
    default=None,
    help="Require the note to belong to this vault.",
)


@click.group(cls=WikiGroup, examples=_NOTE_EXAMPLES)
@click.pass_obj
def note(app: AppContext) -> None:
    """Create, edit, rename and delete notes."""


@note.command(
    examples="""\
  wikigraph note create vlt_0123456789ab "Alpha"
  wikigraph note create vlt_0123456789ab "Beta" --content "Links to [[Alpha]]"
  wikigraph note create vlt_0123456789ab "Gamma" --folder fld_projects"""
)
@click.argument("vault_id")
@click.argument("title")
@click.option("--content", default="", help="Initial note content.")
@click.option("--folder", "folder_id", default=None, help="Folder to place the note in.")
@click.pass_obj
def create(
    app: AppContext,
    vault_id: str,
    title: str,
    content: str,
    folder_id: str | None,
) -> None:
    """Create a note."""
    service = NoteService(app.store)
    app.emit(service.create_note(vault_id, title, folder_id=folder_id, content=content))


@note.command(
    examples="""\
  wikigraph note show note_0123456789ab
  wikigraph --json note show note_0123456789ab"""
)
@click.argument("note_id")
@_vault_option
@click.pass_obj
def show(app: AppContext, note_id: str, vault_id: str | None) -> None:
    """Show a note's content."""
    app.emit(NoteService(app.store).get(note_id, vault_id))


@note.command(
    "list",
    examples="""\
  wikigraph note list vlt_0123456789ab
  wikigraph -v note list vlt_0123456789ab""",
)
@click.argument("vault_id")
@click.pass_obj
def list_cmd(app: AppContext, vault_id: str) -> None:
    """List the notes of a vault in storage order."""
    app.emit(NoteService(app.store).list_notes(vault_id))


@note.command(
    examples="""\
  wikigraph note edit note_0123456789ab --content "New body"
  wikigraph note edit note_0123456789ab --file body.md"""
)
@click.argument("note_id")
@click.option("--content", default=None, help="Replacement content.")
@click.option(
    "--file",
    "content_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read replacement content from a file ('-' for stdin).",
)
@_vault_option
@click.pass_obj
def edit(
    app: AppContext,
    note_id: str,
    content: str | None,
    content_file: IO[str] | None,
    vault_id: str | None,
) -> None:
    """Replace a note's content."""
    if content_file is not None:
        content = content_file.read()
    if content is None:
        click.echo("No content given. Use --content or --file.", err=True)
        raise SystemExit(1)
    app.emit(NoteService(app.store).update_content(note_id, content, vault_id))


@note.command(
    examples="""\
  wikigraph note rename note_0123456789ab "Alpha Prime"
  wikigraph -v note rename note_0123456789ab "Alpha Prime" --vault vlt_0123456789ab"""
)
@click.argument("note_id")
@click.argument("new_title")
@_vault_option
@click.pass_obj
def rename(app: AppContext, note_id: str, new_title: str, vault_id: str | None) -> None:
    """Rename a note and rewrite every link to it in its vault."""
    app.emit(NoteService(app.store).rename(note_id, new_title, vault_id))


@note.command(
    examples="""\
  wikigraph note delete note_0123456789ab"""
)
@click.argument("note_id")
@_vault_option
@click.pass_obj
def delete(app: AppContext, note_id: str, vault_id: str | None) -> None:
    """Delete a note. Links to it are left in place."""
    app.emit(NoteService(app.store).delete(note_id, vault_id))


@note.command(
    "apply-edits",
    examples="""\
  wikigraph note apply-edits vlt_0123456789ab reply.md
  cat reply.md | wikigraph note apply-edits vlt_0123456789ab -""",
)
@click.argument("vault_id")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def apply_edits(app: AppContext, vault_id: str, source: IO[str]) -> None:
    """Apply the edit/create blocks found in an AI reply."""
    app.emit(NoteService(app.store).apply_edit_blocks(vault_id, source.read()))
