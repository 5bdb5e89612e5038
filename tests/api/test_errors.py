"""Tests for the dispatch error -> HTTP response mapping."""
import pytest

from app.core.exceptions import (
    ConcurrentModification,
    InvalidCoordinateFormat,
    InvalidTransition,
    NotFound,
    NoValidStops,
    PersistenceFailure,
)
from app.main import status_code_for


class TestStatusCodes:

    @pytest.mark.parametrize("exc,expected", [
        (InvalidCoordinateFormat("x", "bad"), 422),
        (NoValidStops([1]), 400),
        (InvalidTransition("route", 1, "start", "completed", ["pending"]), 409),
        (NotFound("route", 1), 404),
        (ConcurrentModification("route", 1, 3), 409),
        (PersistenceFailure("get", "route", 1), 500),
    ])
    def test_mapping(self, exc, expected):
        assert status_code_for(exc) == expected


class TestErrorResponses:

    async def test_storage_failure_returns_500_without_internals(self, client, route_repo):
        route_repo.broken = True

        response = await client.get("/api/v1/routes/1")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "persistence_failure"
        assert body["context"]["entity"] == "route"
        assert "database unavailable" not in response.text

    async def test_error_body_shape(self, client):
        response = await client.get("/api/v1/routes/404")
        assert set(response.json()) == {"error", "message", "context"}

    async def test_path_validation_uses_error_shape(self, client):
        response = await client.get("/api/v1/routes/abc")

        assert response.status_code == 422
        body = response.json()
        assert set(body) == {"error", "message", "context"}
        assert body["error"] == "request_validation"
        assert body["context"]["errors"][0]["loc"] == ["path", "route_id"]

    async def test_location_error_names_route_and_action(self, client):
        response = await client.post(
            "/api/v1/routes/3/complete", json={"currentLocation": "north"}
        )

        assert response.status_code == 422
        context = response.json()["context"]
        assert context["route_id"] == 3
        assert context["action"] == "complete"


class TestApplicationSettings:

    def test_debug_flag_follows_settings(self, monkeypatch):
        from app.core.config import settings
        from app.main import create_application

        monkeypatch.setattr(settings, "debug", True)
        assert create_application().debug is True

        monkeypatch.setattr(settings, "debug", False)
        assert create_application().debug is False
