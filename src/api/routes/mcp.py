"""
MCP Router - Tool Execution Endpoints

This module implements the endpoints the chat layer uses to execute tools,
run query plans and list the registered tools.

Every envelope produced by the dispatcher is returned with status 200,
failures included; only malformed bodies are rejected with 400.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.deps import get_catalog, get_dispatcher, get_registry
from src.core.exceptions import NameCollisionError, ToolGatewayException
from src.models.domain import ToolSummary
from src.models.requests import ExecuteToolRequest, ProcessRequest
from src.models.responses import ResultEnvelope
from src.services.catalog import ToolCatalog
from src.tools.dispatcher import RequestDispatcher
from src.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

REGISTER_DESCRIPTORS_ACTION = "register_descriptors"

router = APIRouter(prefix="/api/mcp", tags=["MCP"])


def _bad_request(error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ResultEnvelope.fail(error=error, message=message).to_payload(),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/execute-tool")
async def execute_tool(
    body: ExecuteToolRequest,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> Any:
    """
    Execute a registered tool.

    Returns:
        Result envelope of the execution.
    """
    if not body.tool_id:
        return _bad_request("Missing tool ID", "Tool execution failed")

    envelope = await dispatcher.execute_tool(body.tool_id, body.params or {})
    return envelope.to_payload()


@router.post("/process")
async def process(
    body: ProcessRequest,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
    catalog: ToolCatalog = Depends(get_catalog),
) -> Any:
    """
    Process an invocation request or an administrative action.

    ``{"request": {...}}`` dispatches a raw invocation request (usually of
    kind ``query``). ``{"action": "register_descriptors", "apiId": ...}``
    recompiles a known API descriptor.
    """
    if body.action == REGISTER_DESCRIPTORS_ACTION:
        return _register_descriptors(body.api_id, catalog)
    if body.action is not None:
        return _bad_request(f"Unknown action: {body.action}", "Request processing failed")
    if body.request is None:
        return _bad_request("Missing request", "Request processing failed")

    envelope = await dispatcher.handle_request(body.request)
    return envelope.to_payload()


@router.get("/tools", response_model=list[ToolSummary])
async def list_tools(
    registry: ToolRegistry = Depends(get_registry),
) -> list[ToolSummary]:
    """List all registered tools."""
    return [tool.summary() for tool in registry.list()]


def _register_descriptors(api_id: Any, catalog: ToolCatalog) -> Any:
    if not api_id:
        return _bad_request("Missing API ID", "Registration failed")

    try:
        result = catalog.reregister(api_id)
    except NameCollisionError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ResultEnvelope.fail(
                error=f"{e.error_code.value}: {e.message}", message=e.summary
            ).to_payload(),
        )
    except ToolGatewayException as e:
        return _bad_request(f"{e.error_code.value}: {e.message}", e.summary)

    return ResultEnvelope.ok(
        data=result.model_dump(by_alias=True),
        message=f"Registered {result.tool_count} tools for {result.api_id}",
    ).to_payload()
