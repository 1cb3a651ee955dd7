"""Structured logging for the schedule grid, built on structlog.

Console output for development, JSON lines for production. Log events go to
stderr so that rendered grids and exports on stdout can be piped.
Modules log through get_logger(); nothing here prints directly.
"""

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from src.schedule_grid.config import GridSettings

# Chatty third-party loggers kept at WARNING unless DEBUG is requested
_QUIET_LOGGERS = ("urllib3", "requests")


def setup_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and route stdlib logging to the same stream.

    Args:
        json_output: JSON lines when True, coloured console format otherwise.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        stream: Output stream (default: stderr).
    """
    stream = stream or sys.stderr
    level = getattr(logging, log_level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=stream.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(stream)]
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)


def setup_logging_from_settings(settings: "GridSettings") -> None:
    """Configure logging from SCHEDULE_LOG_JSON / SCHEDULE_LOG_LEVEL."""
    setup_logging(json_output=settings.log_json, log_level=settings.log_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to a module name (pass __name__)."""
    return structlog.get_logger(name)
