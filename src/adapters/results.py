"""
Adapter Result Types

Execution adapters report the outcome of an upstream call as an explicit
tagged value instead of raising. The dispatcher and the normalizer match on
these values; only genuinely unexpected faults travel as exceptions.

Pattern: Result type (success/failure value objects)
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from src.core.exceptions import ErrorCode


@dataclass(frozen=True)
class AdapterSuccess:
    """
    Successful upstream call.

    Attributes:
        data: Decoded response payload (JSON value or text).
        status_code: HTTP status code, when the backend speaks HTTP.
    """

    data: Any
    status_code: Optional[int] = None


@dataclass(frozen=True)
class AdapterFailure:
    """
    Failed upstream call.

    Attributes:
        error: Error kind (UPSTREAM_ERROR, TIMEOUT, MISSING_PARAMETER, ...).
        message: Technical description of the failure.
        status_code: HTTP status code from the upstream, if any.
        code: Finer-grained upstream code such as ``HTTP_404`` or
            ``NETWORK_ERROR``.
        detail: Upstream response body, if one was received.
    """

    error: ErrorCode
    message: str
    status_code: Optional[int] = None
    code: Optional[str] = None
    detail: Any = None


AdapterResult = Union[AdapterSuccess, AdapterFailure]
