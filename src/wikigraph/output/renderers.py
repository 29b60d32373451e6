"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wikigraph.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from wikigraph.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "context" in result.data:
        return str(result.data["context"])

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract a note or vault ID from a dict item."""
    if isinstance(item, dict):
        for key in ("id", "noteId"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="wiki.ok")
    op = Text(f"  {result.op}", style="wiki.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="wiki.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="wiki.id")
    elif key.endswith("title"):
        v = Text(str(value), style="wiki.title")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _note_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of notes."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="wiki.id", no_wrap=True)
    table.add_column("Title", style="wiki.title")
    if verbose:
        table.add_column("Folder", style="dim")
        table.add_column("Updated", style="dim")

    for item in items:
        title = item.get("title", item.get("name", ""))
        row: list[str | Text] = [str(item.get("id", "")), Text(str(title))]
        if verbose:
            row.append(str(item.get("folderId") or ""))
            row.append(str(item.get("updatedAt", "")))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="wiki.error")
    op = Text(f"  {result.op}", style="wiki.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Note renderers ────────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/delete results."""
    _status_line(console, result)
    for key in ("id", "name", "title", "updatedAt", "changed"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_note(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single note as a panel."""
    d = result.data
    body = d.get("content") or "(empty)"
    title = f"{d.get('id', '?')} — {d.get('title', 'Untitled')}"
    console.print(Panel(Text(body), title=Text(title), border_style="dim", expand=False))
    if verbose:
        _field(console, "vault_id", d.get("vaultId", ""))
        _field(console, "updatedAt", d.get("updatedAt", ""))


def _render_note_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list and search results as a table."""
    items = result.data.get("items", [])
    console.print(_note_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} items")
    if verbose:
        _render_meta(console, result)


def _render_rename(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d["id"])
    _field(console, "old_title", d["old_title"])
    _field(console, "new_title", d["new_title"])
    _field(console, "rewritten", d["count"])
    if verbose:
        for note_id in d["updated"]:
            console.print(f"    [wiki.id]{note_id}[/wiki.id]")
        _render_meta(console, result)


def _render_edit_blocks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "blocks", result.data["blocks"])
    for item in result.data["items"]:
        console.print(
            Text(f"  {item['kind']}", style="wiki.op"),
            Text(item["id"], style="wiki.id"),
            Text(item["title"]),
        )
    if verbose:
        _render_meta(console, result)


# ── Link renderers ────────────────────────────────────────────────────


def _render_link_records(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render backlinks or unlinked mentions with their context line."""
    d = result.data
    _status_line(console, result)
    _field(console, "title", d["title"])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Note", style="wiki.id", no_wrap=True)
    table.add_column("Title", style="wiki.title")
    table.add_column("Context", style="wiki.context")
    for item in d["items"]:
        table.add_row(item["noteId"], Text(item["noteTitle"]), Text(item["context"].strip()))
    console.print(table)
    console.print(f"\n{d['count']} items")
    if verbose:
        _render_meta(console, result)


def _render_outgoing(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for item in d["items"]:
        console.print(
            Text(f"  [[{item['title']}]]", style="wiki.link"),
            Text("->"),
            Text(item["noteId"], style="wiki.id"),
        )
    for title in d["unresolved"]:
        console.print(
            Text(f"  [[{title}]]", style="wiki.link"),
            Text("->"),
            Text("unresolved", style="wiki.warning"),
        )
    if verbose:
        _render_meta(console, result)


def _render_graph(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "nodes", len(d["nodes"]))
    _field(console, "links", len(d["links"]))
    if verbose:
        ranked = sorted(d["nodes"], key=lambda n: n["linkCount"], reverse=True)
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("ID", style="wiki.id", no_wrap=True)
        table.add_column("Title", style="wiki.title")
        table.add_column("Links", justify="right")
        for node in ranked:
            table.add_row(node["id"], Text(node["title"]), str(node["linkCount"]))
        console.print(table)
        _render_meta(console, result)


# ── Context renderer ──────────────────────────────────────────────────


def _render_context(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render an assembled AI context with its budget usage."""
    d = result.data
    _status_line(console, result)
    if d.get("active_note_title"):
        _field(console, "active_note_title", d["active_note_title"])
    _field(console, "char_count", d["char_count"])
    _field(console, "budget", d["budget"])
    _field(console, "truncated", d["truncated"])
    _field(console, "notes", len(d["note_ids"]))
    if verbose:
        _render_meta(console, result)
    if d["context"]:
        console.print()
        console.print(d["context"], markup=False)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Vaults
    "create_vault": _render_mutation,
    "list_vaults": _render_note_table,
    # Notes
    "create_note": _render_mutation,
    "update_content": _render_mutation,
    "delete": _render_mutation,
    "get": _render_note,
    "list_notes": _render_note_table,
    "rename": _render_rename,
    "apply_edit_blocks": _render_edit_blocks,
    # Links
    "backlinks": _render_link_records,
    "unlinked_mentions": _render_link_records,
    "outgoing": _render_outgoing,
    "graph": _render_graph,
    # Search and context
    "search": _render_note_table,
    "build_context": _render_context,
    "build_edit_context": _render_context,
}
