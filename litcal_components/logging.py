"""
Structured Logging
==================
structlog setup for applications embedding the client, and the no-op
logger used wherever a logger is optional.

Usage:
    from litcal_components.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_output=False)
    client = create_production_client(logger=get_logger("litcal"))
"""

import logging
import sys
from typing import Any, Optional

import structlog

# Swallows every event: no processors, and ReturnLogger never writes.
NULL_LOGGER = structlog.wrap_logger(structlog.ReturnLogger(), processors=[])


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    service_name: Optional[str] = None,
) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines (production) instead of console output
        service_name: Optional name bound to every event
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    if service_name:
        structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: Optional[str] = None, **initial_values: Any):
    """Return a structlog logger, optionally pre-bound with context."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger
