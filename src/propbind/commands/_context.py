"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Builds the configuration service lazily and owns
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from propbind.config.logging import configure_logging, get_logger
from propbind.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from propbind.config.settings import PropbindSettings
    from propbind.services.configure import ConfigurationService
    from propbind.services.result import ServiceResult

log = get_logger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The service is created on first use so ``--help`` and ``--version``
    never introspect the component catalog.
    """

    def __init__(self, settings: PropbindSettings) -> None:
        self.settings = settings
        self._service: ConfigurationService | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        log.debug("settings_loaded", config_path=str(settings.config_path or ""))

    @property
    def service(self) -> ConfigurationService:
        """Configuration service over the sample component catalog."""
        if self._service is None:
            from propbind.infrastructure.catalog import build_catalog
            from propbind.infrastructure.memory import ObjectRegistry
            from propbind.services.configure import ConfigurationService

            try:
                self._service = ConfigurationService.from_settings(
                    self.settings, build_catalog(), objects=ObjectRegistry()
                )
            except (ValidationError, TypeError, ValueError) as exc:
                msg = f"Invalid schema in configuration: {exc}"
                raise click.ClickException(msg) from exc
            log.debug("service_ready", extra_schemas=len(self.settings.schemas))
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Outside JSON mode, warnings go to
          stderr so they don't pollute piped output.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
