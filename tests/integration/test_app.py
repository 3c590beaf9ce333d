"""Application wiring: startup checks and route handler style."""

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from kubesnoop.core.config import config
from kubesnoop.main import app


class TestApplicationStartup:
    def test_invalid_configuration_stops_startup(self, monkeypatch):
        monkeypatch.setattr(config.rule_store, "backend", "postgres")

        with pytest.raises(ValueError, match="KUBESNOOP_RULES_BACKEND"):
            with TestClient(app):
                pass

    def test_valid_configuration_starts(self, client):
        assert client.get("/").status_code == 200


class TestRouteHandlers:
    """Store and engine calls block, so API handlers run in the threadpool."""

    @pytest.mark.parametrize(
        "route",
        [route for route in app.routes if isinstance(route, APIRoute) and route.path.startswith("/api/v1")],
        ids=lambda route: f"{sorted(route.methods)[0]} {route.path}",
    )
    def test_api_handlers_are_synchronous(self, route):
        assert not inspect.iscoroutinefunction(route.endpoint)
