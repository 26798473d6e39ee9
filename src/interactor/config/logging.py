"""structlog configuration for interactor.

Library modules log through plain ``logging.getLogger(__name__)``. This
module routes those records (and any structlog loggers) through one
stderr handler:

- Human (default): console renderer, colored when stderr is a TTY
- JSON (``--log-json``): one JSON object per line

Context bound with :func:`structlog.contextvars.bound_contextvars`, such
as the ``interaction`` name set while ``execute()`` runs, is merged into
every record.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "interactor"


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
    """Install the stderr handler and set the package log level.

    Safe to call repeatedly; the root handler is replaced, not stacked.

    Args:
        verbose: DEBUG for the ``interactor`` logger; WARNING otherwise.
        log_json: Render JSON lines instead of console text.
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
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
