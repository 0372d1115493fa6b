"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON output for deployed environments
and human-readable console output for development.

The logging configuration includes:
- ISO timestamps
- Log level and logger name
- Exception rendering
- JSON/Console output based on settings
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Standard library logging is routed to stdout at ``log_level`` so that
    structlog's stdlib logger factory emits through it, and structlog is set
    up with timestamping, level, logger name and a JSON or console renderer.

    Args:
        log_level: Minimum level name (e.g. "INFO").
        json_logs: Render JSON lines instead of coloured console output.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Create a singleton logger instance for the application
logger = structlog.get_logger()
