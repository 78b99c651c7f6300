"""
Observability Package

Structured JSON logging with correlation IDs.
"""

from src.observability.logging import (
    clear_correlation_id,
    configure_logging,
    correlation_id_context,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
]
