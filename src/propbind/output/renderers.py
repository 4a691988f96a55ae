"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
extracts the text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from propbind.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from propbind.services.result import ServiceResult


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
    """Minimal output for ``--quiet``: names only, or one status line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    for key in ("items", "members", "entries"):
        items = result.data.get(key)
        if isinstance(items, list):
            return "\n".join(str(item.get("name", "")) for item in items if isinstance(item, dict))
    if result.op == "resolve":
        return str(result.data.get("name", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "pb.ok"), (f"  {result.op}", "pb.op")))


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    style = "pb.name" if key in ("name", "schema", "target") else ""
    console.print(Text.assemble((f"  {key}: ", "pb.key"), (str(value), style)))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "pb.error"), (f"  {result.op}", "pb.op"), f" - {msg}"))

    if err is None:
        return
    for item in err.detail.get("errors", []):
        text = item["message"] if isinstance(item, dict) else str(item)
        console.print(Text.assemble(("  - ", "pb.error"), text))
    for item in err.detail.get("failed", []):
        console.print(Text.assemble(("  - ", "pb.error"), item["message"]))
    suggestions = err.detail.get("suggestions")
    if suggestions:
        console.print(Text.assemble(("  did you mean: ", "pb.key"), ", ".join(suggestions)))
    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Schema renderers ──────────────────────────────────────────────────


def _render_schema_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Schema", style="pb.name", no_wrap=True)
    table.add_column("Fields", justify="right")
    table.add_column("Description")
    for item in result.data.get("items", []):
        table.add_row(item["name"], str(item["fields"]), item.get("description", ""))
    console.print(table)


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text.assemble((d["name"], "pb.name"), (f"  {d.get('description', '')}", "dim")))
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Field", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Required")
    table.add_column("Default")
    table.add_column("Constraint")
    for entry in d.get("entries", []):
        constraint = ""
        if "range" in entry:
            low, high = entry["range"]
            constraint = f"[{'' if low is None else low}, {'' if high is None else high}]"
        elif "choices" in entry:
            constraint = " | ".join(entry["choices"])
        elif "schema" in entry:
            constraint = entry["schema"]
        elif "items" in entry:
            constraint = f"items: {entry['items']}"
        table.add_row(
            entry["name"],
            Text(entry["kind"], style=style_for_kind(entry["kind"])),
            Text("yes", style="pb.required") if entry["required"] else "",
            json.dumps(entry["default"]) if "default" in entry else "",
            constraint,
        )
    console.print(table)


# ── Configuration renderers ───────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "schema", result.data.get("schema", ""))
    for key, value in result.data.get("merged", {}).items():
        _field(console, key, value)


def _render_apply(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "target", result.data.get("target", ""))
    for path in result.data.get("applied", []):
        console.print(Text.assemble(("  set ", "pb.ok"), path))


# ── Type renderers ────────────────────────────────────────────────────


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "name", d["name"])
    if d.get("query") != d["name"]:
        _field(console, "query", d["query"])
    if d.get("aliases"):
        _field(console, "aliases", ", ".join(d["aliases"]))
    _field(console, "members", d.get("members", 0))
    if verbose:
        _field(console, "reference", d.get("reference"))


def _render_members(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text(result.data["name"], style="pb.name"))
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Member", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Type")
    table.add_column("Access")
    if verbose:
        table.add_column("Backing", style="dim")
    for member in result.data.get("members", []):
        row: list[Any] = [
            member["name"],
            Text(member["kind"], style=style_for_kind(member["kind"])),
            member["type"],
            "read-write" if member["writable"] else Text("read-only", style="pb.readonly"),
        ]
        if verbose:
            row.append(member["backing"])
        table.add_row(*row)
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "list_schemas": _render_schema_list,
    "show_schema": _render_schema,
    "validate": _render_validate,
    "apply_configuration": _render_apply,
    "resolve": _render_resolve,
    "members": _render_members,
}
