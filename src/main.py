"""
API Tool Gateway - Main Application Entry Point

This module provides the FastAPI application for the API Tool Gateway
service. The gateway compiles declarative API descriptors into tools and
executes tool calls, form submissions and query plans against the
described APIs.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapters.database import DatabaseAdapter, DatabaseClient
from src.adapters.http import GraphQLAdapter, HttpAdapter, create_http_client
from src.api.middleware.logging import RequestLoggingMiddleware
from src.api.routes.apis import router as apis_router
from src.api.routes.form_submit import router as form_submit_router
from src.api.routes.health import APP_VERSION
from src.api.routes.health import router as health_router
from src.api.routes.mcp import router as mcp_router
from src.core.config import Settings, get_settings
from src.observability.logging import configure_logging
from src.services.catalog import ToolCatalog
from src.tools.compiler import CompilerAdapters
from src.tools.dispatcher import RequestDispatcher
from src.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

# Application metadata
APP_NAME = "API Tool Gateway"
APP_DESCRIPTION = "Compiles API descriptors into tools and executes tool calls"


# =============================================================================
# Application Factory
# =============================================================================


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    database_client: Optional[DatabaseClient] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings to use (default: environment settings).
        http_client: Upstream HTTP client. When supplied, the caller owns it
            and it is not closed on shutdown.
        database_client: Client used by database tools (optional).

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # =====================================================================
        # STARTUP
        # =====================================================================
        configure_logging(settings.log_level)
        logger.info(
            f"{APP_NAME} v{APP_VERSION} starting in {settings.environment} mode"
        )

        client = http_client or create_http_client(
            timeout_seconds=settings.adapter_timeout_seconds,
            max_connections=settings.http_max_connections,
            max_keepalive=settings.http_max_keepalive,
        )
        http_adapter = HttpAdapter(
            client,
            max_retries=settings.upstream_max_retries,
            retry_backoff_seconds=settings.upstream_retry_backoff_seconds,
        )
        adapters = CompilerAdapters(
            http=http_adapter,
            graphql=GraphQLAdapter(http_adapter),
            database=DatabaseAdapter(database_client),
            default_base_url=settings.api_base_url,
        )
        registry = ToolRegistry()

        app.state.settings = settings
        app.state.adapters = adapters
        app.state.registry = registry
        app.state.catalog = ToolCatalog(registry, adapters)
        app.state.dispatcher = RequestDispatcher(
            registry,
            http_adapter,
            default_base_url=settings.api_base_url,
            timeout=settings.dispatch_timeout_seconds,
        )

        if settings.descriptors_file:
            app.state.catalog.load_from_file(settings.descriptors_file)
        logger.info(f"Tool registry ready with {len(registry)} tools")

        yield

        # =====================================================================
        # SHUTDOWN
        # =====================================================================
        logger.info(f"{APP_NAME} shutting down")
        if http_client is None:
            await client.aclose()

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(mcp_router)
    app.include_router(form_submit_router)
    app.include_router(apis_router)

    @app.get("/", tags=["Info"])
    async def root() -> dict[str, Any]:
        """Root endpoint returning basic service information."""
        return {
            "service": APP_NAME,
            "version": APP_VERSION,
            "docs": "/docs" if settings.environment != "production" else "disabled",
        }

    return app


app = create_app()
