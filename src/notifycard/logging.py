"""Structured logging configuration for notifycard.

Logging is built on structlog and routed through the standard library so that
third-party loggers end up in the same stream:

- Pretty console output by default (for people reading CI logs)
- JSON output when NOTIFYCARD_LOG_FORMAT=json (for log shippers)
- Level taken from NOTIFYCARD_LOG_LEVEL unless overridden by the CLI

Usage:
    from notifycard.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger(__name__).bind(template="card.json")
    log.debug("template_rendered", placeholders=3)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
]

LOG_FORMAT_ENV_VAR = "NOTIFYCARD_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "NOTIFYCARD_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _level_from_env() -> int:
    """Level named by NOTIFYCARD_LOG_LEVEL, WARNING if unset or unknown."""
    name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def _wants_json() -> bool:
    """True when NOTIFYCARD_LOG_FORMAT is json."""
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _pre_chain() -> list[Processor]:
    """Processors applied to both structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(use_json: bool) -> Processor:
    """Final renderer: JSON lines or the dev console renderer."""
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; each call replaces the previous handler so
    repeated CLI invocations in one process (tests) do not duplicate output.

    Args:
        force_json: Emit JSON regardless of NOTIFYCARD_LOG_FORMAT.
        level: Explicit log level. Falls back to NOTIFYCARD_LOG_LEVEL.
    """
    use_json = force_json or _wants_json()
    log_level = level if level is not None else _level_from_env()

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.processors.dict_tracebacks
            if use_json
            else structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json),
            ],
            foreign_pre_chain=_pre_chain(),
        )
    )

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, usually called with ``__name__``."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind key/value pairs to every log line emitted from this context.

    Example:
        bind_context(run_id="1234", template="card.json")
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop everything previously bound with bind_context()."""
    structlog.contextvars.clear_contextvars()
