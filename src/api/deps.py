"""
API Dependencies

This module provides FastAPI dependency injection functions for the API layer.

The registry, dispatcher and catalog are created once by the application
lifespan and kept on ``app.state``; the providers below hand them to route
handlers. Tests can replace any of them through FastAPI's
dependency_overrides mechanism.
"""

import logging

from fastapi import Request

from src.core.config import Settings, get_settings as _get_settings
from src.services.catalog import ToolCatalog
from src.tools.dispatcher import RequestDispatcher
from src.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """
    Get application settings.

    Returns the settings the application was created with, falling back to
    the cached environment settings.
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else _get_settings()


def get_registry(request: Request) -> ToolRegistry:
    """Get the application's tool registry."""
    return request.app.state.registry


def get_dispatcher(request: Request) -> RequestDispatcher:
    """Get the application's request dispatcher."""
    return request.app.state.dispatcher


def get_catalog(request: Request) -> ToolCatalog:
    """Get the application's descriptor catalog."""
    return request.app.state.catalog


__all__ = [
    "get_settings",
    "get_registry",
    "get_dispatcher",
    "get_catalog",
]
