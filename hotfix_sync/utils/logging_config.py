"""
Logging configuration using structlog.

Log events go to stderr so that command output on stdout (for example the
message printed by ``hotfix-sync show``) stays clean for piping.
"""

import logging
import sys
from typing import Any, Literal

import structlog


def configure_logging(log_level: str = "WARNING", log_format: Literal["console", "json"] = "console") -> None:
    """Configure structured logging.

    Sets up structlog with a pipeline of processors that add log levels,
    timestamps and stack information before rendering.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: ``console`` for human-readable lines, ``json`` for one
            JSON object per event
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "json":
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    level = logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
