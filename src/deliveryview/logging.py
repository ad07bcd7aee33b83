"""Structured logging for deliveryview.

This module configures structlog on top of the standard library, enabling:
- JSON-formatted logs for production (machine-readable)
- Pretty console logs for development (human-readable)
- Context binding (pipeline name, anchor execution)

Library modules log through ``logging.getLogger(__name__)``;
``configure_logging`` sets up both the stdlib handler and structlog.

Usage:
    from deliveryview.logging import configure_logging, get_logger

    configure_logging(json_format=True)

    logger = get_logger("my.module")
    logger.info("pipeline_refreshed", pipeline="release", instances=3)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

_configured = False


def configure_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    logger_factory: Any = None,
) -> None:
    """Configure structured logging for deliveryview.

    Call this once at application startup before any logging occurs.

    Args:
        json_format: If True, output JSON logs (for production).
                    If False, output pretty console logs (for development).
        level: Minimum log level (default: INFO)
        logger_factory: Custom logger factory (for testing)
    """
    global _configured

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )

    # Both module loggers and structlog events end up in stdlib handlers
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("deliveryview").setLevel(level)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory or structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Get a structured logger for the given name.

    Args:
        name: Logger name (typically __name__ or module path)

    Returns:
        A bound logger that supports structured logging.
    """
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent structured logs.

    Example:
        bind_context(pipeline="release")
        logger.info("refreshing")  # Includes pipeline
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
