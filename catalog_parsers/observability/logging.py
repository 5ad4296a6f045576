"""
Structured logging configuration using structlog.

Parsers log through the standard library (``logging.getLogger(__name__)``);
this module routes those records through structlog so an application
embedding the parsers gets JSON logs in production and a readable console
in development.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from catalog_parsers.config.settings import Settings, get_settings

# Loggers of the transport stack that are too chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "charset_normalizer")


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structured logging for the application.

    Usage:
        setup_logging()
        logger = get_logger(__name__)
        logger.info("Fetched list", source="COMICK_FUN", offset=20)
    """
    settings = settings or get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger (defaults to the root logger name)."""
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables to all subsequent log messages.

    Typically used to tag every record of one request with the source
    being browsed, e.g. ``bind_context(source="COMICK_FUN")``.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
