"""
Structured Logging

DESIGN DECISION: Every cache refresh, skipped profile and upstream
failure is logged as a structured event. This makes it possible to
answer "why did the assistant pick that account?" after the fact.

Logs go to stderr. When the server speaks a tool-call protocol over
stdio, stdout belongs to the protocol.
"""

import logging
import sys
from typing import Optional

import structlog


_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _configure_structlog(json_logs: bool) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog with defaults on import; configure_logging() refines it
_configure_structlog(json_logs=True)


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Route log output to stderr at the given level.

    Must run before any module emits its first log event. Loggers are
    cached on first use, so one that has already logged keeps the
    renderer that was configured at that moment.
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=level.upper(),
        format="%(message)s",
        force=True,
    )
    _configure_structlog(json_logs)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally named after its module."""
    return structlog.get_logger(name)
