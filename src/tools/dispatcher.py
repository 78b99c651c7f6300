"""
Request Dispatcher

The single entry point for invocation requests. The dispatcher classifies a
request by kind, validates parameters against the resolved tool's contract,
runs the execution under a deadline and normalizes the outcome.

Failure contract: nothing raises out of handle_request() or execute_tool().
Tool lookup and parameter problems are reported as failure envelopes before
any execution is attempted; adapter failures arrive as explicit results; a
missed deadline raises AdapterTimeoutError; every exception is caught at
the boundary and reported as data.

Pattern: Command dispatcher with one handler per request kind
Pattern: Dependency injection (registry and adapter are injected)
Pattern: Fail-fast validation with graceful error wrapping
"""

import asyncio
import time
from collections.abc import Awaitable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from src.adapters.http import EndpointTarget, HttpAdapter
from src.adapters.results import AdapterResult
from src.core.exceptions import (
    AdapterTimeoutError,
    ErrorCode,
    InvalidRequestError,
    MissingParameterError,
    ToolNotFoundError,
)
from src.models.domain import ToolDescriptor
from src.models.requests import (
    FormSubmitInvocation,
    QueryInvocation,
    ToolInvocation,
    invocation_adapter,
)
from src.models.responses import ResultEnvelope
from src.observability.logging import get_logger
from src.tools.normalizer import normalize
from src.tools.registry import ToolRegistry

# Default deadline for a whole tool execution in seconds
DEFAULT_TIMEOUT = 60.0

Invocation = Union[ToolInvocation, FormSubmitInvocation, QueryInvocation]


# =============================================================================
# Parameter Validation
# =============================================================================


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple, set)):
        return len(value) == 0
    return False


def find_missing_parameter(
    tool: ToolDescriptor, params: Mapping[str, Any]
) -> Optional[str]:
    """
    Return the first required parameter that is absent or empty.

    Keys not declared in the tool's schema are ignored; the schema is a
    minimum contract, not an exhaustive one.

    Args:
        tool: The resolved tool.
        params: Supplied parameter values.

    Returns:
        Name of the first missing parameter, or None if the contract holds.
    """
    for name in tool.required_parameters:
        if name not in params or _is_empty(params[name]):
            return name
    return None


# =============================================================================
# RequestDispatcher Class
# =============================================================================


class RequestDispatcher:
    """
    Validates and routes invocation requests to tool execution.

    Attributes:
        registry: The ToolRegistry to resolve tools from.
        http_adapter: Adapter used for ad-hoc form submissions.
        default_base_url: Base URL for form submissions that carry none.
        timeout: Deadline in seconds for a single execution.

    Example:
        >>> dispatcher = RequestDispatcher(registry, http_adapter)
        >>> envelope = await dispatcher.execute_tool("shop_get__items", {})
    """

    def __init__(
        self,
        registry: ToolRegistry,
        http_adapter: HttpAdapter,
        default_base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.registry = registry
        self.http_adapter = http_adapter
        self.default_base_url = default_base_url
        self.timeout = timeout
        self._log = get_logger(__name__)

    # =========================================================================
    # Entry Points
    # =========================================================================

    async def handle_request(
        self, request: Union[Invocation, Mapping[str, Any]]
    ) -> ResultEnvelope:
        """
        Handle an invocation request of any kind.

        Args:
            request: A typed invocation, or its raw JSON form with a ``kind``
                field (``tool``, ``form-submit`` or ``query``).

        Returns:
            ResultEnvelope describing the outcome. Never raises.
        """
        started = time.perf_counter()
        kind = "unknown"
        try:
            invocation = self._parse(request)
            kind = invocation.kind
            envelope = await self._dispatch(invocation)
        except Exception as e:
            envelope = normalize(e)

        self._log.info(
            "invocation_completed",
            kind=kind,
            target=_describe_target(request),
            success=envelope.success,
            error=envelope.error,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return envelope

    async def execute_tool(
        self, tool_id: Optional[str], params: Optional[Mapping[str, Any]] = None
    ) -> ResultEnvelope:
        """
        Execute a registered tool by name.

        Equivalent to handle_request() with a request of kind ``tool``.

        Args:
            tool_id: Registered tool name.
            params: Parameter values.

        Returns:
            ResultEnvelope describing the outcome. Never raises.
        """
        return await self.handle_request(
            {"kind": "tool", "toolId": tool_id, "params": dict(params or {})}
        )

    # =========================================================================
    # Classification
    # =========================================================================

    def _parse(self, request: Union[Invocation, Mapping[str, Any]]) -> Invocation:
        if isinstance(request, (ToolInvocation, FormSubmitInvocation, QueryInvocation)):
            return request
        if not isinstance(request, Mapping):
            raise InvalidRequestError(
                f"Unsupported request type: {type(request).__name__}"
            )
        try:
            return invocation_adapter.validate_python(dict(request))
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidRequestError(
                f"Invalid {request.get('kind', 'unknown')} request: "
                f"{location or 'request'}: {first.get('msg', 'validation failed')}"
            ) from e

    async def _dispatch(self, invocation: Invocation) -> ResultEnvelope:
        match invocation:
            case ToolInvocation(tool_id=tool_id, params=params):
                return await self._handle_tool(tool_id, params)
            case FormSubmitInvocation():
                return await self._handle_form_submit(invocation)
            case QueryInvocation():
                return await self._handle_query(invocation)
        raise InvalidRequestError(f"Unsupported request kind: {invocation.kind}")

    # =========================================================================
    # Handlers
    # =========================================================================

    async def _handle_tool(
        self, tool_id: str, params: Mapping[str, Any]
    ) -> ResultEnvelope:
        try:
            tool = self.registry.get(tool_id)
        except ToolNotFoundError as e:
            return normalize(e)

        missing = find_missing_parameter(tool, params)
        if missing is not None:
            return normalize(MissingParameterError(missing, tool_name=tool_id))

        # Each invocation binds from its own copy of the parameters
        result = await self._run(tool.execute(dict(params)), tool_name=tool_id)
        return normalize(result)

    async def _handle_form_submit(
        self, invocation: FormSubmitInvocation
    ) -> ResultEnvelope:
        info = invocation.api_info
        target = EndpointTarget(
            base_url=info.base_url or self.default_base_url,
            path=info.path,
            method=info.method,
        )
        result = await self._run(
            self.http_adapter.execute(target, dict(invocation.form_data)),
            target=f"Form submission {info.method} {info.path}",
        )
        envelope = normalize(result)
        if envelope.success:
            return envelope.model_copy(update={"message": "Form submitted successfully"})
        return envelope

    async def _handle_query(self, invocation: QueryInvocation) -> ResultEnvelope:
        if not invocation.plan:
            return ResultEnvelope.fail(
                error=f"{ErrorCode.INVALID_REQUEST.value}: No tools selected for query",
                message="No tools were selected for the query",
            )

        async def run_call(tool_id: str, params: dict[str, Any]) -> ResultEnvelope:
            try:
                return await self._handle_tool(tool_id, params)
            except Exception as e:
                return normalize(e)

        envelopes = await asyncio.gather(
            *[
                run_call(call.tool_id, {"userQuery": invocation.text, **call.params})
                for call in invocation.plan
            ]
        )

        results = [
            {"toolId": call.tool_id, **envelope.to_payload()}
            for call, envelope in zip(invocation.plan, envelopes)
        ]
        data = {"query": invocation.text, "results": results}
        failed = sum(1 for envelope in envelopes if not envelope.success)
        if failed:
            return ResultEnvelope(
                success=False,
                data=data,
                error=f"{failed} of {len(envelopes)} planned tool calls failed",
                message="Some tools failed while answering the query",
            )
        return ResultEnvelope.ok(data=data)

    # =========================================================================
    # Timeout Handling
    # =========================================================================

    async def _run(
        self,
        call: Awaitable[AdapterResult],
        tool_name: Optional[str] = None,
        target: Optional[str] = None,
    ) -> AdapterResult:
        """
        Await an execution under the dispatcher deadline.

        Raises:
            AdapterTimeoutError: If the deadline passes. The abandoned call
                never touches the registry, so nothing needs rolling back.
        """
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AdapterTimeoutError(
                self.timeout, tool_name=tool_name, target=target
            ) from e


def _describe_target(request: Any) -> Optional[str]:
    match request:
        case ToolInvocation():
            return request.tool_id
        case FormSubmitInvocation():
            return f"{request.api_info.method} {request.api_info.path}"
        case QueryInvocation():
            return ",".join(call.tool_id for call in request.plan)
        case Mapping():
            return request.get("toolId") or request.get("tool_id")
    return None
