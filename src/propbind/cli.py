"""Root CLI group for propbind with global flags and command registration."""

from __future__ import annotations

import click

from propbind import __version__
from propbind.commands import register_commands
from propbind.commands._base import PropbindGroup
from propbind.commands._context import AppContext
from propbind.config.settings import PropbindSettings


@click.group(
    cls=PropbindGroup,
    invoke_without_command=True,
    examples="""\
  propbind schemas list
  propbind resolve rigidboddy
  propbind --json validate material '{"materialName": "Brick", "shaderName": "Standard"}'
  propbind -c ./propbind.toml members Light""",
)
@click.version_option(version=__version__, prog_name="propbind")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """propbind - inspect schemas, types, and configuration payloads."""
    settings = PropbindSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
