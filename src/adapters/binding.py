"""
Request Binding

Maps a tool's bound parameter values onto a concrete HTTP request: values
whose names match path placeholders are substituted into the path, the rest
go to the query string for read-like methods or to a JSON body for mutating
methods.

Binding is a pure function of (method, path, params). Every invocation
computes its own BoundRequest, so concurrent calls of the same tool never
share binding state.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

from src.core.exceptions import MissingParameterError

# Methods whose leftover parameters travel in the query string
QUERY_METHODS = frozenset({"GET", "DELETE", "HEAD", "OPTIONS"})

# Parameters the chat layer attaches to every call; never sent upstream
RESERVED_PARAMETERS = frozenset({"userQuery", "baseUrl"})

# Matches {name} anywhere and :name only as a whole path segment, so literal
# colons such as "/v1/items:batchGet" are left alone
_PLACEHOLDER = re.compile(
    r"\{([A-Za-z_][A-Za-z0-9_\-]*)\}|(?<=/):([A-Za-z_][A-Za-z0-9_]*)(?=/|$)"
)


@dataclass(frozen=True)
class BoundRequest:
    """
    A concrete request ready for an HTTP client.

    Attributes:
        method: Upper-case HTTP method.
        path: Path with placeholders substituted.
        query: Query string parameters.
        body: JSON body for mutating methods, None otherwise.
    """

    method: str
    path: str
    query: dict[str, Any] = field(default_factory=dict)
    body: Optional[dict[str, Any]] = None


def path_placeholders(path: str) -> list[str]:
    """Return the placeholder names of a path in order of appearance."""
    return [m.group(1) or m.group(2) for m in _PLACEHOLDER.finditer(path)]


def strip_reserved(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of params without chat-layer reserved keys."""
    return {k: v for k, v in params.items() if k not in RESERVED_PARAMETERS}


def _format_query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def bind_request(method: str, path: str, params: dict[str, Any]) -> BoundRequest:
    """
    Bind parameters to a method and path.

    Args:
        method: HTTP method (any case).
        path: Endpoint path with optional ``{name}``/``:name`` placeholders.
        params: Parameter values for this invocation.

    Returns:
        BoundRequest for the invocation.

    Raises:
        MissingParameterError: If a placeholder has no value.

    Example:
        >>> bind_request("GET", "/items/{id}", {"id": "42", "limit": "10"})
        BoundRequest(method='GET', path='/items/42', query={'limit': '10'}, body=None)
    """
    method = method.upper()
    remaining = strip_reserved(params)
    consumed: set[str] = set()

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        value = remaining.get(name)
        if value is None or value == "":
            raise MissingParameterError(name)
        consumed.add(name)
        return quote(str(value), safe="")

    bound_path = _PLACEHOLDER.sub(substitute, path)
    leftover = {k: v for k, v in remaining.items() if k not in consumed}

    if method in QUERY_METHODS:
        query = {
            k: _format_query_value(v) for k, v in leftover.items() if v is not None
        }
        return BoundRequest(method=method, path=bound_path, query=query)

    return BoundRequest(method=method, path=bound_path, body=leftover)


def join_url(base_url: Optional[str], path: str) -> str:
    """
    Join a base URL and a path with exactly one slash between them.

    An absolute path (``http://...``) is returned unchanged.
    """
    if path.startswith(("http://", "https://")) or not base_url:
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
