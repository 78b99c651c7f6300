"""
APIs Router - Descriptor Administration

Registers, recompiles and removes API descriptors. Registering a descriptor
replaces every tool previously compiled from it in one atomic step. REST
descriptors can also be imported from an OpenAPI document.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from src.api.deps import get_catalog
from src.core.exceptions import (
    InvalidDescriptorError,
    NameCollisionError,
    ToolGatewayException,
)
from src.models.requests import ImportOpenApiRequest
from src.models.responses import ResultEnvelope
from src.services.catalog import ToolCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/apis", tags=["APIs"])

_ERROR_STATUS = {
    InvalidDescriptorError: status.HTTP_400_BAD_REQUEST,
    NameCollisionError: status.HTTP_409_CONFLICT,
}


def _error_response(exc: ToolGatewayException) -> JSONResponse:
    return JSONResponse(
        status_code=_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST),
        content=ResultEnvelope.fail(
            error=f"{exc.error_code.value}: {exc.message}", message=exc.summary
        ).to_payload(),
    )


@router.get("")
async def list_apis(catalog: ToolCatalog = Depends(get_catalog)) -> Any:
    """List the accepted API descriptors."""
    return [
        descriptor.model_dump(by_alias=True, mode="json")
        for descriptor in catalog.descriptors()
    ]


@router.post("/import")
async def import_api(
    body: ImportOpenApiRequest,
    catalog: ToolCatalog = Depends(get_catalog),
) -> Any:
    """
    Register a REST descriptor converted from an OpenAPI document.

    Returns:
        201 with the registration result; 400 when the ID or document is
        missing or the document defines no operations, 409 on a name
        collision.
    """
    if not body.id or body.document is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ResultEnvelope.fail(
                error="Missing API id or OpenAPI document",
                message="OpenAPI import failed",
            ).to_payload(),
        )

    try:
        result = catalog.import_openapi(
            body.document,
            body.id,
            name=body.name,
            description=body.description,
            base_url=body.base_url,
        )
    except ToolGatewayException as e:
        logger.warning(f"Rejected OpenAPI import {body.id}: {e.message}")
        return _error_response(e)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=ResultEnvelope.ok(
            data=result.model_dump(by_alias=True),
            message=f"Imported {result.tool_count} tools for {body.id}",
        ).to_payload(),
    )


@router.put("/{api_id}")
async def put_api(
    api_id: str,
    payload: dict[str, Any] = Body(...),
    catalog: ToolCatalog = Depends(get_catalog),
) -> Any:
    """
    Register or recompile an API descriptor.

    The path ID takes precedence over any ``id`` in the body.

    Returns:
        400 for an invalid descriptor, 409 when a compiled tool name is
        owned by another descriptor.
    """
    try:
        result = catalog.register_descriptor({**payload, "id": api_id})
    except ToolGatewayException as e:
        logger.warning(f"Rejected API descriptor {api_id}: {e.message}")
        return _error_response(e)

    return ResultEnvelope.ok(
        data=result.model_dump(by_alias=True),
        message=f"Registered {result.tool_count} tools for {api_id}",
    ).to_payload()


@router.delete("/{api_id}")
async def delete_api(
    api_id: str,
    catalog: ToolCatalog = Depends(get_catalog),
) -> Any:
    """Remove an API descriptor and its tools."""
    removed = catalog.remove_descriptor(api_id)
    return ResultEnvelope.ok(
        data={"apiId": api_id, "removed": removed},
        message=f"Removed {removed} tools for {api_id}",
    ).to_payload()
