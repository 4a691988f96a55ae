"""Commands: resolve type names and list their members."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from propbind.commands._base import PropbindCommand

if TYPE_CHECKING:
    from propbind.commands._context import AppContext


@click.command(
    cls=PropbindCommand,
    examples="""\
  propbind resolve rb
  propbind resolve UnityEngine.AudioSource
  propbind --json resolve Rigidboddy""",
)
@click.argument("name")
@click.pass_obj
def resolve(app: AppContext, name: str) -> None:
    """Resolve type NAME, suggesting close matches when it is unknown."""
    app.emit(app.service.resolve_type(name))


@click.command(
    cls=PropbindCommand,
    examples="""\
  propbind members Light
  propbind -v members renderer
  propbind -q members Camera""",
)
@click.argument("name")
@click.pass_obj
def members(app: AppContext, name: str) -> None:
    """List the assignable members of type NAME."""
    app.emit(app.service.describe_type(name))
