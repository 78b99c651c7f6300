"""
Tests for API Dependencies.

Dependencies read the lifespan-built components from app.state.
"""

from types import SimpleNamespace

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient


def _app_with_state(**state) -> FastAPI:
    from src.api.deps import get_catalog, get_dispatcher, get_registry, get_settings

    app = FastAPI()
    for key, value in state.items():
        setattr(app.state, key, value)

    @app.get("/deps")
    async def deps(
        settings=Depends(get_settings),
        registry=Depends(get_registry),
        dispatcher=Depends(get_dispatcher),
        catalog=Depends(get_catalog),
    ) -> dict:
        return {
            "service": settings.service_name,
            "registry": registry.name,
            "dispatcher": dispatcher.name,
            "catalog": catalog.name,
        }

    return app


class TestStateDependencies:
    """Tests for the app.state providers."""

    def test_components_come_from_app_state(self):
        from src.core.config import Settings

        app = _app_with_state(
            settings=Settings(service_name="gateway-under-test"),
            registry=SimpleNamespace(name="registry"),
            dispatcher=SimpleNamespace(name="dispatcher"),
            catalog=SimpleNamespace(name="catalog"),
        )

        response = TestClient(app).get("/deps")

        assert response.json() == {
            "service": "gateway-under-test",
            "registry": "registry",
            "dispatcher": "dispatcher",
            "catalog": "catalog",
        }

    def test_settings_fall_back_to_environment(self):
        from src.core.config import get_settings

        app = _app_with_state(
            registry=SimpleNamespace(name="r"),
            dispatcher=SimpleNamespace(name="d"),
            catalog=SimpleNamespace(name="c"),
        )

        response = TestClient(app).get("/deps")

        assert response.json()["service"] == get_settings().service_name
