"""
HTTP Execution Adapter

This module performs the side-effecting upstream call for REST and GraphQL
tools. It owns the client factory (connection pooling, timeouts, default
headers) and the translation of httpx outcomes into AdapterResult values.

Status discrimination follows the upstream error classes the gateway
reports to users: 400 invalid parameters, 401/403 authentication and
permission failures, 404 missing resources, 5xx server failures. Transient
failures (network errors, 502/503/504) are retried with exponential backoff,
but only for idempotent methods so that a retry can never duplicate a side
effect on the remote API.

Pattern: Adapter (httpx behind an explicit result type)
Pattern: Factory for configured HTTP clients
Pattern: Retry with exponential backoff
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

import httpx

from src.adapters.binding import BoundRequest, bind_request, join_url
from src.adapters.results import AdapterFailure, AdapterResult, AdapterSuccess
from src.core.exceptions import ErrorCode, MissingParameterError

logger = logging.getLogger(__name__)


# =============================================================================
# Default Configuration Constants
# =============================================================================

DEFAULT_TIMEOUT_SECONDS: float = 30.0
DEFAULT_MAX_CONNECTIONS: int = 100
DEFAULT_MAX_KEEPALIVE: int = 20

# Methods that may be retried without risking duplicate side effects
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})

_STATUS_MESSAGES: dict[int, str] = {
    400: "Invalid request parameters",
    401: "Authentication required",
    403: "You do not have permission to perform this operation",
    404: "Resource not found",
    502: "Service temporarily unavailable, please try again later",
    503: "Service under maintenance, please try again later",
    504: "Service response timeout, please try again later",
}


# =============================================================================
# Client Factory
# =============================================================================


def create_http_client(
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
    max_connections: Optional[int] = None,
    max_keepalive: Optional[int] = None,
    headers: Optional[dict[str, str]] = None,
) -> httpx.AsyncClient:
    """
    Create a configured HTTP client with connection pooling and timeouts.

    Args:
        base_url: Base URL for all requests (optional; tools carry their own).
        timeout_seconds: Per-request timeout in seconds (default: 30.0).
        max_connections: Maximum connections in pool (default: 100).
        max_keepalive: Maximum keepalive connections (default: 20).
        headers: Additional headers to include in all requests.

    Returns:
        httpx.AsyncClient: Configured async HTTP client.

    Example:
        >>> client = create_http_client(timeout_seconds=10.0)
        >>> adapter = HttpAdapter(client)
    """
    timeout = timeout_seconds if timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS
    max_conn = max_connections if max_connections is not None else DEFAULT_MAX_CONNECTIONS
    max_keep = max_keepalive if max_keepalive is not None else DEFAULT_MAX_KEEPALIVE

    limits = httpx.Limits(
        max_connections=max_conn,
        max_keepalive_connections=max_keep,
    )

    default_headers = {
        "User-Agent": "api-tool-gateway/1.0",
        "Accept": "application/json",
    }
    if headers:
        default_headers.update(headers)

    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(timeout),
        headers=default_headers,
        limits=limits,
    )


# =============================================================================
# Error Extraction
# =============================================================================


def extract_error_message(data: Any) -> Optional[str]:
    """
    Extract an error message from a common API error body shape.

    Recognises plain strings and objects with ``message``, ``msg``,
    ``error``, ``errorMessage`` or ``error.message``.
    """
    if not data:
        return None
    if isinstance(data, str):
        return data
    if not isinstance(data, dict):
        return None
    for key in ("message", "msg", "error", "errorMessage"):
        if isinstance(data.get(key), str):
            return data[key]
    nested = data.get("error")
    if isinstance(nested, dict) and isinstance(nested.get("message"), str):
        return nested["message"]
    return None


def extract_error_code(data: Any) -> Optional[str]:
    """Extract an application error code from a common API error body shape."""
    if not isinstance(data, dict):
        return None
    for key in ("code", "errorCode"):
        if data.get(key):
            return str(data[key])
    nested = data.get("error")
    if isinstance(nested, dict) and nested.get("code"):
        return str(nested["code"])
    return None


def default_status_message(status_code: int) -> str:
    """Human-readable default message for an HTTP status code."""
    if status_code in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[status_code]
    if status_code >= 500:
        return "Internal server error"
    return f"Request failed with status {status_code}"


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


# =============================================================================
# HTTP Adapter
# =============================================================================


@dataclass(frozen=True)
class EndpointTarget:
    """
    Static binding data of a REST endpoint.

    Attributes:
        base_url: Base URL of the API (None to use the path as-is).
        path: Endpoint path with optional placeholders.
        method: Upper-case HTTP method.
        headers: Extra headers for every call (stored read-only).
    """

    base_url: Optional[str]
    path: str
    method: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


class HttpAdapter:
    """
    Executes bound HTTP requests and reports explicit results.

    Attributes:
        max_retries: Retries for idempotent calls on transient failures.
        retry_backoff_seconds: Base delay; attempt n waits base * 2**n.

    Example:
        >>> adapter = HttpAdapter(create_http_client())
        >>> target = EndpointTarget("https://api.example.com", "/items/{id}", "GET")
        >>> result = await adapter.execute(target, {"id": "42"})
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_retries: int = 3,
        retry_backoff_seconds: float = 1.0,
    ) -> None:
        self._client = client
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds

    async def execute(
        self, target: EndpointTarget, params: dict[str, Any]
    ) -> AdapterResult:
        """
        Bind params against the target and perform the call.

        Args:
            target: Endpoint binding data.
            params: Parameter values for this invocation.

        Returns:
            AdapterSuccess with the decoded body, or AdapterFailure.
        """
        try:
            bound = bind_request(target.method, target.path, params)
        except MissingParameterError as e:
            return AdapterFailure(
                error=ErrorCode.MISSING_PARAMETER,
                message=e.message,
                code="INVALID_PARAMETERS",
            )

        url = join_url(target.base_url, bound.path)
        attempt = 0
        while True:
            result = await self.send(bound, url, target.headers)
            if not self._should_retry(bound.method, result, attempt):
                return result
            delay = self.retry_backoff_seconds * (2**attempt)
            logger.warning(
                f"Retrying {bound.method} {url} after {result.message} "
                f"(attempt {attempt + 1}/{self.max_retries}, delay {delay}s)"
            )
            await asyncio.sleep(delay)
            attempt += 1

    async def send(
        self,
        bound: BoundRequest,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> AdapterResult:
        """
        Perform a single request without retries.

        Args:
            bound: The bound request.
            url: Absolute URL (or path relative to the client base URL).
            headers: Extra headers for this request.

        Returns:
            AdapterSuccess or AdapterFailure.
        """
        try:
            response = await self._client.request(
                bound.method,
                url,
                params=bound.query or None,
                json=bound.body,
                headers=headers or None,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Upstream timeout: {bound.method} {url}: {e!r}")
            return AdapterFailure(
                error=ErrorCode.TIMEOUT,
                message=f"Request timeout: {bound.method} {url}",
                code="REQUEST_TIMEOUT",
            )
        except (httpx.UnsupportedProtocol, httpx.InvalidURL) as e:
            # A URL without scheme or host is a descriptor problem, not a
            # transient failure, so it is never retried
            logger.warning(f"Invalid upstream URL: {bound.method} {url}: {e!r}")
            return AdapterFailure(
                error=ErrorCode.UPSTREAM_ERROR,
                message=f"Invalid upstream URL ({url}): {e}",
                code="INVALID_URL",
            )
        except httpx.TransportError as e:
            logger.warning(f"Upstream transport error: {bound.method} {url}: {e!r}")
            return AdapterFailure(
                error=ErrorCode.UPSTREAM_ERROR,
                message=f"Network connection error ({url}): {e}",
                code="NETWORK_ERROR",
            )

        data = _decode(response)
        if response.is_success:
            return AdapterSuccess(data=data, status_code=response.status_code)

        status = response.status_code
        message = extract_error_message(data) or default_status_message(status)
        return AdapterFailure(
            error=ErrorCode.UPSTREAM_ERROR,
            message=f"HTTP {status}: {message}",
            status_code=status,
            code=extract_error_code(data) or f"HTTP_{status}",
            detail=data,
        )

    def _should_retry(self, method: str, result: AdapterResult, attempt: int) -> bool:
        if not isinstance(result, AdapterFailure):
            return False
        if attempt >= self.max_retries or method not in IDEMPOTENT_METHODS:
            return False
        return (
            result.code == "NETWORK_ERROR"
            or result.status_code in RETRYABLE_STATUS_CODES
        )


# =============================================================================
# GraphQL Adapter
# =============================================================================


class GraphQLAdapter:
    """
    Executes GraphQL documents over HTTP POST.

    A response carrying a non-empty ``errors`` array is reported as an
    upstream failure even when the HTTP status is 200.
    """

    def __init__(self, http: HttpAdapter) -> None:
        self._http = http

    async def execute(
        self,
        url: str,
        query: str,
        variables: dict[str, Any],
        headers: Optional[Mapping[str, str]] = None,
    ) -> AdapterResult:
        """
        Post ``{query, variables}`` to the GraphQL endpoint.

        Args:
            url: GraphQL endpoint URL.
            query: GraphQL document.
            variables: Variables for the document.
            headers: Extra headers.

        Returns:
            AdapterSuccess with the ``data`` member, or AdapterFailure.
        """
        bound = BoundRequest(
            method="POST",
            path=url,
            body={"query": query, "variables": variables},
        )
        result = await self._http.send(bound, url, headers)
        if isinstance(result, AdapterFailure):
            return result

        payload = result.data
        if isinstance(payload, dict):
            errors = payload.get("errors")
            if errors:
                first = errors[0] if isinstance(errors, list) else errors
                message = (
                    first.get("message") if isinstance(first, dict) else str(first)
                )
                return AdapterFailure(
                    error=ErrorCode.UPSTREAM_ERROR,
                    message=f"GraphQL error: {message}",
                    status_code=result.status_code,
                    code="GRAPHQL_ERROR",
                    detail=errors,
                )
            if "data" in payload:
                return AdapterSuccess(data=payload["data"], status_code=result.status_code)
        return result
