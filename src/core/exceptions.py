"""
Custom exceptions for the API Tool Gateway.

This module provides the error taxonomy of the tool registry and dispatch
engine. All exceptions inherit from ToolGatewayException and carry an
ErrorCode so that the dispatcher can turn them into result envelopes
without inspecting their shape.

Compile-time errors (InvalidDescriptorError, NameCollisionError) surface to
the administrative caller. Request-time errors (ToolNotFoundError,
MissingParameterError, AdapterTimeoutError, InternalError) never leave the
dispatcher; they are reported as ``success: false`` envelopes. Upstream
failures are not exceptions at all: adapters return them as AdapterFailure
values.

Pattern: Exception hierarchy with machine-readable error codes
"""

from enum import Enum
from typing import Any, Optional


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for tool gateway exceptions.

    These codes identify error kinds consistently across result envelopes,
    HTTP responses and logs.
    """

    INVALID_DESCRIPTOR = "INVALID_DESCRIPTOR"
    NAME_COLLISION = "NAME_COLLISION"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class ToolGatewayException(Exception):
    """
    Base exception for all tool gateway errors.

    Attributes:
        message: Technical error message (goes into the envelope ``error``).
        error_code: Machine-readable error code from ErrorCode enum.
        summary: Short human-readable summary (goes into ``message``).
    """

    summary: str = "Request processing failed"

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Compile-time Errors
# =============================================================================


class InvalidDescriptorError(ToolGatewayException):
    """
    Raised when an API descriptor cannot be compiled into tools.

    Attributes:
        api_id: ID of the offending descriptor (if known).
        field: Name of the missing or invalid config field (if known).
    """

    summary = "Invalid API descriptor"

    def __init__(
        self,
        message: str,
        api_id: Optional[str] = None,
        field: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_DESCRIPTOR, **kwargs)
        self.api_id = api_id
        self.field = field


class NameCollisionError(ToolGatewayException):
    """
    Raised when a tool name is already owned by a different source.

    Attributes:
        tool_name: The contested tool name.
        source_id: Source that attempted the registration.
        existing_source_id: Source that currently owns the name.
    """

    summary = "Tool name already registered by another API"

    def __init__(
        self,
        tool_name: str,
        source_id: Optional[str] = None,
        existing_source_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Tool '{tool_name}' is already registered by source "
            f"'{existing_source_id}' (attempted by '{source_id}')",
            ErrorCode.NAME_COLLISION,
        )
        self.tool_name = tool_name
        self.source_id = source_id
        self.existing_source_id = existing_source_id


# =============================================================================
# Request-time Errors
# =============================================================================


class ToolNotFoundError(ToolGatewayException):
    """Raised when a requested tool is not found in the registry."""

    summary = "Tool execution failed: tool not found"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool not found: {tool_name}", ErrorCode.TOOL_NOT_FOUND)
        self.tool_name = tool_name


class MissingParameterError(ToolGatewayException):
    """
    Raised when a required parameter is absent or empty.

    Attributes:
        parameter: Name of the missing parameter.
        tool_name: Tool whose contract was violated (if known).
    """

    summary = "Tool execution failed: missing required parameter"

    def __init__(self, parameter: str, tool_name: Optional[str] = None) -> None:
        super().__init__(
            f"Missing required parameter: {parameter}",
            ErrorCode.MISSING_PARAMETER,
        )
        self.parameter = parameter
        self.tool_name = tool_name


class AdapterTimeoutError(ToolGatewayException):
    """
    Raised when a tool call exceeds its deadline.

    Named AdapterTimeoutError to avoid shadowing the builtin TimeoutError.
    """

    summary = "Tool execution timed out"

    def __init__(
        self,
        timeout_seconds: float,
        tool_name: Optional[str] = None,
        target: Optional[str] = None,
    ) -> None:
        if target is None:
            target = f"Tool {tool_name}" if tool_name else "Upstream call"
        super().__init__(
            f"{target} timed out after {timeout_seconds}s", ErrorCode.TIMEOUT
        )
        self.timeout_seconds = timeout_seconds
        self.tool_name = tool_name


class InvalidRequestError(ToolGatewayException):
    """Raised when an invocation request cannot be parsed into a known kind."""

    summary = "Invalid invocation request"

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.INVALID_REQUEST)


class InternalError(ToolGatewayException):
    """Wraps anything unanticipated that reached the dispatcher boundary."""

    summary = "Internal error while executing tool"

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.INTERNAL_ERROR)


# Envelope summaries per error code. UPSTREAM_ERROR only ever arrives as an
# AdapterFailure value, so it has no exception class.
ERROR_SUMMARIES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DESCRIPTOR: InvalidDescriptorError.summary,
    ErrorCode.NAME_COLLISION: NameCollisionError.summary,
    ErrorCode.TOOL_NOT_FOUND: ToolNotFoundError.summary,
    ErrorCode.MISSING_PARAMETER: MissingParameterError.summary,
    ErrorCode.UPSTREAM_ERROR: "Upstream API request failed",
    ErrorCode.TIMEOUT: AdapterTimeoutError.summary,
    ErrorCode.INVALID_REQUEST: InvalidRequestError.summary,
    ErrorCode.INTERNAL_ERROR: InternalError.summary,
}
