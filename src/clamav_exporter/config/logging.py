"""structlog configuration for clamav-exporter.

Two output modes, both on stderr:
- console (default): colored key=value lines when stderr is a TTY
- JSON (--log-json): one object per line, for log shippers

Modules log through ``logging.getLogger(__name__)``; the stdlib records are
rendered by the same structlog formatter, including any ``extra=`` fields.
Scrapes run on prometheus_client's server threads, so fields that must
appear on every event (the clamd target) live in process-wide context
rather than in contextvars.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LOGGER_NAME = "clamav_exporter"

_process_context: dict[str, Any] = {}


def bind_process_context(**values: Any) -> None:
    """Replace the fields attached to every log event from any thread."""
    _process_context.clear()
    _process_context.update(values)


def _add_process_context(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    for key, value in _process_context.items():
        event_dict.setdefault(key, value)
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        _add_process_context,
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
    """Route structlog and stdlib logging through one stderr handler.

    The ``clamav_exporter`` logger runs at INFO (DEBUG with *verbose*) so
    that serve start-up and daemon outages are visible by default; every
    other library stays at WARNING.
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
            foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
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

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.INFO)
