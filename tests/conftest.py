"""
Pytest configuration for the API Tool Gateway test suite.

This configuration sets up:
- Test markers for categorization
- Shared fixtures following the FakeRepository pattern: a fresh registry,
  a counting stub binding, sample API descriptors, and httpx clients backed
  by MockTransport so no test touches the network
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.adapters.results import AdapterResult, AdapterSuccess  # noqa: E402
from src.adapters.tool_bindings import ToolBinding  # noqa: E402


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config):
    """
    Register custom markers for test categorization.

    - unit: Tests for individual components
    - integration: Tests through the HTTP boundary
    """
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for service interactions")


# =============================================================================
# Stub Binding
# =============================================================================


class StubBinding(ToolBinding):
    """
    Binding double that records every call.

    Attributes:
        calls: Parameter dicts of each execute() call, in order.
        result: Result returned by execute() (default: echo of params).
    """

    kind = "stub"

    def __init__(
        self,
        result: Optional[AdapterResult] = None,
        delay: float = 0.0,
        error: Optional[BaseException] = None,
    ) -> None:
        self.calls: list[dict[str, Any]] = []
        self.result = result
        self.delay = delay
        self.error = error

    async def execute(self, params: dict[str, Any]) -> AdapterResult:
        self.calls.append(params)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return AdapterSuccess(data={"echo": params})


# =============================================================================
# Registry and Tool Fixtures
# =============================================================================


@pytest.fixture
def registry():
    """Fresh, empty ToolRegistry."""
    from src.tools.registry import ToolRegistry

    return ToolRegistry()


@pytest.fixture
def stub_binding() -> StubBinding:
    """Counting stub binding that echoes its params."""
    return StubBinding()


@pytest.fixture
def binding_factory() -> type[StubBinding]:
    """The StubBinding class, for tests that need custom results or delays."""
    return StubBinding


@pytest.fixture
def make_tool() -> Callable[..., Any]:
    """
    Factory for ToolDescriptors backed by a StubBinding.

    Usage:
        tool = make_tool("lookup", required=["id"], source_id="shop")
    """
    from src.models.descriptors import ParameterSchema
    from src.models.domain import ToolDescriptor

    def _make_tool(
        name: str,
        required: Optional[list[str]] = None,
        optional: Optional[list[str]] = None,
        source_id: Optional[str] = None,
        binding: Optional[ToolBinding] = None,
    ) -> ToolDescriptor:
        parameters = {
            p: ParameterSchema(type="string", required=True) for p in required or []
        }
        parameters.update(
            {p: ParameterSchema(type="string") for p in optional or []}
        )
        return ToolDescriptor(
            name=name,
            description=f"{name} tool",
            parameters=parameters,
            binding=binding or StubBinding(),
            source_id=source_id,
        )

    return _make_tool


# =============================================================================
# Descriptor Fixtures
# =============================================================================


@pytest.fixture
def shop_descriptor() -> dict[str, Any]:
    """REST descriptor with a read and a write endpoint."""
    return {
        "id": "shop",
        "name": "Shop API",
        "description": "Product catalog",
        "type": "rest",
        "config": {
            "baseUrl": "https://shop.example.com/api",
            "headers": {"X-Api-Key": "secret"},
            "endpoints": [
                {
                    "path": "/items/{id}",
                    "method": "get",
                    "description": "Get an item",
                    "parameters": {
                        "id": {"type": "string", "required": True},
                        "limit": {"type": "number"},
                    },
                },
                {
                    "path": "/items",
                    "method": "POST",
                    "title": "Create item",
                    "parameters": {
                        "name": {"type": "string", "required": True},
                        "price": {"type": "number"},
                    },
                },
            ],
        },
    }


@pytest.fixture
def graphql_descriptor() -> dict[str, Any]:
    """GraphQL descriptor without a fixed document."""
    return {
        "id": "catalog",
        "name": "Catalog",
        "type": "graphql",
        "config": {"baseUrl": "https://graph.example.com/graphql"},
    }


@pytest.fixture
def database_descriptor() -> dict[str, Any]:
    """Database descriptor."""
    return {
        "id": "warehouse",
        "name": "Warehouse",
        "type": "database",
        "config": {"connectionString": "postgresql://localhost/warehouse"},
    }


# =============================================================================
# HTTP Fixtures
# =============================================================================


@pytest.fixture
def mock_client_factory() -> Callable[..., httpx.AsyncClient]:
    """
    Factory for httpx.AsyncClient instances backed by MockTransport.

    Usage:
        client = mock_client_factory(lambda request: httpx.Response(200, json={}))
    """

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture
def compiler_adapters(mock_client_factory):
    """
    CompilerAdapters over a MockTransport client that echoes the request.

    The response body is ``{"method", "url", "body"}`` of the received request.
    """
    import json

    from src.adapters.database import DatabaseAdapter
    from src.adapters.http import GraphQLAdapter, HttpAdapter
    from src.tools.compiler import CompilerAdapters

    def echo(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        return httpx.Response(
            200,
            json={"method": request.method, "url": str(request.url), "body": body},
        )

    http = HttpAdapter(mock_client_factory(echo), max_retries=0)
    return CompilerAdapters(
        http=http,
        graphql=GraphQLAdapter(http),
        database=DatabaseAdapter(),
        default_base_url="http://localhost:3030",
    )
