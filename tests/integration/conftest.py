"""
Integration test infrastructure.

The application is created through create_app() with a MockTransport-backed
httpx client standing in for the described APIs, and driven through
fastapi.testclient.TestClient so the lifespan runs for every test.
"""

import json
from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def upstream_requests() -> list[httpx.Request]:
    """Requests received by the mock upstream APIs."""
    return []


@pytest.fixture
def upstream_client(upstream_requests) -> httpx.AsyncClient:
    """
    Mock upstream.

    - GET /api/items/{id}: returns the item, 404 for id "missing"
    - POST /api/items: echoes the body with status 201
    - GET /api/report: returns an already-rendered mermaid chart
    - anything else: echoes method, url and body
    """

    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        if path == "/api/items/missing":
            return httpx.Response(404, json={"message": "Item not found"})
        if path.startswith("/api/items/") and request.method == "GET":
            return httpx.Response(200, json={"id": path.rsplit("/", 1)[-1], "name": "Widget"})
        if path == "/api/items" and request.method == "POST":
            return httpx.Response(201, json={"created": body})
        if path == "/api/report":
            return httpx.Response(
                200,
                json={"_visualizationComplete": True, "mermaidCode": "graph TD; A-->B"},
            )
        return httpx.Response(
            200, json={"method": request.method, "url": str(request.url), "body": body}
        )

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def settings(tmp_path):
    """Settings for a test application."""
    from src.core.config import Settings

    return Settings(
        environment="development",
        api_base_url="http://forms.example.com",
        dispatch_timeout_seconds=5,
        upstream_max_retries=0,
        descriptors_file=str(tmp_path / "apis.json"),
    )


@pytest.fixture
def client(settings, upstream_client) -> Iterator[TestClient]:
    """TestClient over a fresh application."""
    from src.main import create_app

    app = create_app(settings=settings, http_client=upstream_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def shop_api(client, shop_descriptor) -> dict:
    """Register the shop descriptor through the admin API."""
    response = client.put("/api/apis/shop", json=shop_descriptor)
    assert response.status_code == 200
    return response.json()
