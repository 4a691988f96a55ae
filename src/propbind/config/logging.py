"""structlog configuration for propbind.

All log output goes to stderr so that stdout stays reserved for results.
The console renderer is used by default (colored on a TTY); ``--log-json``
switches to one JSON object per line.

Engine modules log through plain ``logging.getLogger(__name__)`` and never
import structlog; the stdlib records are rendered by the same
:class:`structlog.stdlib.ProcessorFormatter` as structlog events.
"""

from __future__ import annotations

import logging
import sys

import structlog

ROOT_LOGGER = "propbind"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install one stderr handler on the root logger.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbose: DEBUG for the ``propbind`` logger tree instead of WARNING.
            Third-party loggers stay at WARNING either way.
        log_json: JSON lines instead of the console renderer.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger(ROOT_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger for the CLI edge, bound to *name*."""
    return structlog.stdlib.get_logger(name)
