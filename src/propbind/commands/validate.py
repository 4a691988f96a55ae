"""Command: validate a JSON payload against a schema."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from propbind.commands._base import PropbindCommand

if TYPE_CHECKING:
    from propbind.commands._context import AppContext


def read_payload(payload: str) -> Any:
    """Load PAYLOAD given as JSON text, a file path, or ``-`` for stdin."""
    if payload == "-":
        text = click.get_text_stream("stdin").read()
    elif not payload.lstrip().startswith(("{", "[")) and Path(payload).is_file():
        try:
            text = Path(payload).read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read payload file {payload}: {exc}"
            raise click.ClickException(msg) from exc
    else:
        text = payload
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Payload is not valid JSON: {exc}"
        raise click.ClickException(msg) from exc


@click.command(
    cls=PropbindCommand,
    examples="""\
  propbind validate material '{"materialName": "Brick", "shaderName": "Standard"}'
  propbind validate particle_system config.json
  cat payload.json | propbind --json validate object -
  propbind validate Rigidbody '{"mass": 2, "useGravity": "false"}'""",
)
@click.argument("name")
@click.argument("payload")
@click.pass_obj
def validate(app: AppContext, name: str, payload: str) -> None:
    """Validate PAYLOAD against schema NAME and print the merged result.

    NAME is a registered schema or a component type; PAYLOAD is JSON text,
    a path to a JSON file, or - to read from stdin.
    """
    app.emit(app.service.validate(read_payload(payload), name))
