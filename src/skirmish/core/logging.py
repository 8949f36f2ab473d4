"""Structured logging for the Skirmish combat engine.

Engine modules log through structlog with keyword context (actor, turn,
source...). ``configure_logging`` picks a coloured console renderer for
interactive runs or one JSON object per line for machine consumption,
and routes standard-library logging from the HTTP stack to stderr.

Example:
    >>> from skirmish.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Command executed", actor="Bob", kind="attack", amount=30)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


APP_NAME = "skirmish"

# Standard-library loggers of the AI client stack, capped at WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "openai")

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_name(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and standard-library logging.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        json_format: Render JSON lines instead of the console format.
        log_file: Also write standard-library records to this file.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(format=_STDLIB_FORMAT, level=numeric_level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach context to every following log entry in this context.

    Example:
        >>> bind_context(match_id="3f9c2a1b7d0e")
        >>> logger.info("Round started")  # includes match_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context(*keys: str) -> None:
    """Remove the given context keys, or all context when none are named."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


__all__ = [
    "APP_NAME",
    "add_app_name",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
