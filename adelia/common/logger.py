"""
Structured logging using structlog.

JSON output for deployed services, colored console output for local work
and the command-line build script. Rendered markup and base64 payloads can
end up in event fields, so long string values are cut down before
rendering.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from adelia.common.config import get_settings


def truncate_long_values(max_length: int) -> Processor:
    """Processor that shortens string fields longer than ``max_length``."""

    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if key != "event" and isinstance(value, str) and len(value) > max_length:
                event_dict[key] = f"{value[:max_length]}...(+{len(value) - max_length} chars)"
        return event_dict

    return processor


def setup_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    config = get_settings().logging
    level = logging.getLevelName(config.level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        truncate_long_values(config.max_value_length),
    ]

    if config.format == "json":
        renderer: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[*shared_processors, *renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger


class LoggerMixin:
    """Gives a class a ``logger`` bound with its name."""

    @property
    def logger(self) -> structlog.BoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


def log_context(**kwargs: Any) -> None:
    """
    Add fields to every later log line in the current context.

    The request middleware clears them when the request ends.

    Usage:
        log_context(creative_id="abc123", kind="interstitial")
        logger.info("Rendering")  # includes creative_id and kind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


@contextmanager
def log_scope(**kwargs: Any) -> Iterator[None]:
    """Like :func:`log_context`, but the fields are unbound on exit."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


setup_logging()

logger = get_logger("adelia")
