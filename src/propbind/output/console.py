"""Rich Console factory and theme for propbind output.

Consoles render into a StringIO buffer so renderers keep a plain
``-> str`` contract. Outside a terminal (tests, pipes) Rich drops color.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PROPBIND_THEME = Theme(
    {
        "pb.ok": "bold green",
        "pb.error": "bold red",
        "pb.op": "bold cyan",
        "pb.key": "dim",
        "pb.name": "bold blue",
        "pb.required": "bold",
        "pb.readonly": "dim italic",
    }
)

_KIND_STYLES: dict[str, str] = {
    "integer": "magenta",
    "number": "magenta",
    "boolean": "yellow",
    "string": "green",
    "enum": "cyan",
    "object_reference": "blue",
    "nested_object": "blue",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PROPBIND_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Rich style for a value kind; vectors, colors and the rest are unstyled."""
    return _KIND_STYLES.get(kind, "")
