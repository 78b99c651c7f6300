"""
Health Router - Health Check Endpoints

Liveness reports the service identity and the number of registered tools.
Readiness reports which execution adapters are available.
"""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from src.api.deps import get_registry, get_settings
from src.core.config import Settings
from src.models.responses import HealthResponse
from src.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

router = APIRouter(tags=["Health"])


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health(
    settings: Settings = Depends(get_settings),
    registry: ToolRegistry = Depends(get_registry),
) -> HealthResponse:
    """Liveness check."""
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=APP_VERSION,
        tool_count=len(registry),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> ReadinessResponse:
    """
    Readiness check.

    The service is ready once the lifespan has built the registry. A missing
    database client is reported but does not make the service unready, since
    only database tools depend on it.
    """
    state = request.app.state
    adapters = getattr(state, "adapters", None)
    checks = {
        "registry": getattr(state, "registry", None) is not None,
        "http": adapters is not None,
        "database": adapters is not None and adapters.database.configured,
    }
    ready = checks["registry"] and checks["http"]
    if not ready:
        logger.warning(f"Readiness check failed: {checks}")
    return ReadinessResponse(status="ready" if ready else "not_ready", checks=checks)
