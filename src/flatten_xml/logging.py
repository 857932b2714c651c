from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

LOGGER_NAME = "flatten_xml"


def setup_logging(*, verbose: bool = False, filename: str | Path | None = None) -> structlog.BoundLogger:
    """Set up structured logging for the flatten_xml module.

    The diagnostics stream never shares a channel with the XML document: it goes
    to stderr, or to `filename` when one is given. Without `verbose` only warnings
    and errors are emitted, so the discovery trace stays silent.

    Args:
        verbose: Emit the debug-level trace of discovery and classification decisions.
        filename: Optional path to a log file. If None, logs are written to stderr.

    Returns:
        A structlog logger instance configured for the flatten_xml module.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handlers: list[logging.Handler] = []
    if filename:
        handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(LOGGER_NAME)


def get_logger() -> structlog.BoundLogger:
    """Return the module logger with whatever configuration is currently active."""
    return structlog.get_logger(LOGGER_NAME)


def trace_logger(*, verbose: bool) -> structlog.BoundLogger:
    """Return a stderr logger for library use, independent of the global configuration.

    Args:
        verbose: Let the debug-level trace through; otherwise only warnings and errors.

    Returns:
        A structlog logger writing JSON lines to stderr.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    return structlog.wrap_logger(
        structlog.PrintLogger(sys.stderr),
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_name=LOGGER_NAME,
    )
