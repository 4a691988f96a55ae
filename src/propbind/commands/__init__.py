"""Subcommand modules for propbind.

Provides register_commands(), which uses deferred imports to keep
``propbind --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command group and standalone commands on the root group."""
    from propbind.commands.schemas import schemas

    cli.add_command(schemas)

    from propbind.commands.types import members, resolve
    from propbind.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(resolve)
    cli.add_command(members)
