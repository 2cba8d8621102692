"""Structured logging for the scheduler tools.

Reports are written to stdout, so every log event goes to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

DEFAULT_LOG_LEVEL = "warning"


def resolve_level(name: str) -> int:
    try:
        return LOG_LEVELS[name.strip().lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"unknown log level '{name}'") from None


def configure_logging(level: str = DEFAULT_LOG_LEVEL, *, stream: TextIO | None = None) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


__all__ = ["DEFAULT_LOG_LEVEL", "LOG_LEVELS", "configure_logging", "get_logger", "resolve_level"]
