"""
Core module for the API Tool Gateway.

This module contains configuration and the error taxonomy.
"""

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    AdapterTimeoutError,
    ErrorCode,
    InternalError,
    InvalidDescriptorError,
    InvalidRequestError,
    MissingParameterError,
    NameCollisionError,
    ToolGatewayException,
    ToolNotFoundError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "ToolGatewayException",
    "InvalidDescriptorError",
    "NameCollisionError",
    "ToolNotFoundError",
    "MissingParameterError",
    "AdapterTimeoutError",
    "InvalidRequestError",
    "InternalError",
]
