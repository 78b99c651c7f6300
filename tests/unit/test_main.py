"""
Main Application Tests

Tests application setup and the lifespan that wires the registry, catalog
and dispatcher onto app.state.
"""

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient


def _echo_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    )


# =============================================================================
# Application Setup
# =============================================================================


class TestApplicationSetup:
    """Tests for create_app()."""

    def test_module_level_app(self):
        """The module exposes an app for uvicorn."""
        from src.main import app

        assert isinstance(app, FastAPI)
        assert app.title == "API Tool Gateway"
        assert app.version == "1.0.0"

    def test_routes_included(self):
        from src.main import create_app

        paths = {route.path for route in create_app().routes}

        assert {
            "/",
            "/health",
            "/health/ready",
            "/api/mcp/execute-tool",
            "/api/mcp/process",
            "/api/mcp/tools",
            "/api/form-submit",
            "/api/apis",
            "/api/apis/{api_id}",
        } <= paths

    def test_docs_disabled_in_production(self):
        from src.core.config import Settings
        from src.main import create_app

        app = create_app(Settings(environment="production"))

        assert app.docs_url is None
        assert app.redoc_url is None


# =============================================================================
# Lifespan
# =============================================================================


class TestLifespan:
    """Tests for the application lifespan."""

    def test_state_populated_on_startup(self):
        """
        Startup builds the components route handlers depend on.
        """
        from src.core.config import Settings
        from src.main import create_app
        from src.services.catalog import ToolCatalog
        from src.tools.dispatcher import RequestDispatcher
        from src.tools.registry import ToolRegistry

        settings = Settings(dispatch_timeout_seconds=7)
        app = create_app(settings, http_client=_echo_client())

        with TestClient(app):
            assert isinstance(app.state.registry, ToolRegistry)
            assert isinstance(app.state.catalog, ToolCatalog)
            assert isinstance(app.state.dispatcher, RequestDispatcher)
            assert app.state.dispatcher.timeout == 7
            assert app.state.settings is settings

    def test_supplied_client_left_open(self):
        """A caller-owned HTTP client is not closed on shutdown."""
        from src.main import create_app

        client = _echo_client()
        with TestClient(create_app(http_client=client)):
            pass

        assert client.is_closed is False

    def test_missing_descriptors_file_is_tolerated(self, tmp_path):
        from src.core.config import Settings
        from src.main import create_app

        settings = Settings(descriptors_file=str(tmp_path / "absent.json"))
        app = create_app(settings, http_client=_echo_client())

        with TestClient(app) as client:
            assert client.get("/health").json()["toolCount"] == 0
