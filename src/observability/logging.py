"""
Structured Logging Module

This module provides structured JSON logging with correlation ID support
for the HTTP boundary and the dispatcher. Library modules keep using the
standard ``logging.getLogger(__name__)``; invocation and request events go
through structlog so that every line carries the correlation ID of the
request that caused it.

Pattern: Structured logging for observability
Pattern: Singleton configuration (configure once at startup)
"""

import contextvars
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor


_configured: bool = False


# =============================================================================
# Correlation ID Context
# =============================================================================

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID, or None if unset."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id_var.set(None)


@contextmanager
def correlation_id_context(correlation_id: str) -> Generator[None, None, None]:
    """
    Context manager for setting correlation ID.

    Example:
        >>> with correlation_id_context("req-12345"):
        ...     logger.info("tool_executed", tool="shop_get__items")
    """
    token = _correlation_id_var.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id_var.reset(token)


# =============================================================================
# Custom Processors
# =============================================================================


def add_correlation_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add correlation ID to log event if set."""
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_timestamp(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 UTC timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def rename_level(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename log_level to level for cleaner output."""
    if "log_level" in event_dict:
        event_dict["level"] = event_dict.pop("log_level")
    return event_dict


# =============================================================================
# Configuration
# =============================================================================


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Call once at application startup. Subsequent calls are no-ops unless
    force=True.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream (default: sys.stdout).
        force: Force reconfiguration (for tests).
    """
    global _configured

    if _configured and not force:
        return

    level_int = _level_to_int(level)
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_correlation_id,
        rename_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_int),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        level=level_int,
        stream=stream or sys.stdout,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        force=force,
    )

    _configured = True


def reset_logging() -> None:
    """Reset logging configuration state. Tests only."""
    global _configured
    _configured = False


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger bound to a name.

    Configures logging with defaults if the application has not done so.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("tool_executed", tool="shop_get__items", success=True)
    """
    configure_logging()
    return structlog.get_logger().bind(logger=name)


def _level_to_int(level: str) -> int:
    """Convert level string to logging int."""
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)
