"""Command group: inspect registered configuration schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from propbind.commands._base import PropbindGroup

if TYPE_CHECKING:
    from propbind.commands._context import AppContext


@click.group(
    cls=PropbindGroup,
    examples="""\
  propbind schemas list
  propbind schemas show material
  propbind --json schemas show particle_system.main
  propbind schemas show Rigidbody""",
)
def schemas() -> None:
    """Inspect configuration schemas."""


@schemas.command(
    "list",
    examples="""\
  propbind schemas list
  propbind -q schemas list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every registered schema."""
    app.emit(app.service.list_schemas())


@schemas.command(
    examples="""\
  propbind schemas show material
  propbind schemas show particle_system.shape
  propbind schemas show AudioSource""",
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show the entries of schema NAME (or the schema derived from type NAME)."""
    app.emit(app.service.show_schema(name))
