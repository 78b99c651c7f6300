"""
Request Logging Middleware

This module implements request/response logging for the HTTP boundary.

Every request is bound to a correlation ID, taken from the ``X-Request-ID``
header when the caller supplies one and generated otherwise. The ID is set
in the logging context for the duration of the request, so the dispatcher's
invocation events carry it too, and echoed back in the response header.
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.observability.logging import correlation_id_context, get_logger

REQUEST_ID_HEADER = "X-Request-ID"


# =============================================================================
# Sensitive Header Redaction
# =============================================================================

# Headers that should be redacted (case-insensitive substring matching)
SENSITIVE_HEADER_PATTERNS = [
    "authorization",
    "api-key",
    "apikey",
    "api_key",
    "x-auth-token",
    "cookie",
]


def redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    """
    Redact sensitive headers from a headers dictionary.

    Args:
        headers: Dictionary of HTTP headers

    Returns:
        Dictionary with sensitive values replaced with [REDACTED]
    """
    redacted = {}
    for key, value in headers.items():
        key_lower = key.lower()
        is_sensitive = any(pattern in key_lower for pattern in SENSITIVE_HEADER_PATTERNS)
        redacted[key] = "[REDACTED]" if is_sensitive else value
    return redacted


# =============================================================================
# Request Logging Middleware
# =============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.

    Features:
    - Binds a correlation ID to the request context
    - Logs method, path, status code and duration
    - Redacts sensitive headers from debug logs
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """
        Process the request and log details.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from the handler, with the correlation ID header set
        """
        log = get_logger(__name__)
        start_time = time.perf_counter()
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        method = request.method
        path = request.url.path

        with correlation_id_context(correlation_id):
            log.debug(
                "request_started",
                method=method,
                path=path,
                headers=redact_sensitive_headers(dict(request.headers)),
            )

            try:
                response = await call_next(request)
            except Exception as e:
                log.error(
                    "request_failed",
                    method=method,
                    path=path,
                    error=f"{type(e).__name__}: {e}",
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
                raise

            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            emit = log.warning if response.status_code >= 400 else log.info
            emit(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response
