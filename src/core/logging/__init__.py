"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging capabilities with JSON formatting for production
and human-readable console output for development.

The logging configuration includes:
- Timestamp formatting
- Log level inclusion and filtering
- JSON/Console output based on environment
- Context variables (correlation IDs bound per request)
- Logger caching
"""

import logging

import structlog

from src.core.config.settings import settings


def configure_logging(log_level: str = settings.LOG_LEVEL, json_logs: bool = settings.LOG_JSON):
    """
    Configures the application's logging system.

    This function sets up structlog with:
    1. Merged context variables, so a request's correlation ID reaches every log line
    2. ISO format timestamps
    3. Log level inclusion
    4. JSON formatting for production (when LOG_JSON=True)
    5. Console formatting for development
    6. A level filter taken from LOG_LEVEL
    7. Logger caching for performance
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

# Create a singleton logger instance for the application
logger = structlog.get_logger()
