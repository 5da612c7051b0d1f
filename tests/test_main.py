"""Tests for application wiring: banner, health, middleware and error handlers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from taskboard.database import get_db
from taskboard.services import task_service


@pytest.mark.asyncio
async def test_root_banner(public_client):
    response = await public_client.get("/")

    assert response.status_code == 200
    assert response.text == "API is running..."
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_health_reports_database(public_client):
    response = await public_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"] == {"database": True}
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_health_returns_503_on_database_failure(app, public_client):
    async def failing_db():
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("DB Down")))
        yield session

    app.dependency_overrides[get_db] = failing_db
    try:
        response = await public_client.get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["checks"]["database"] is False


@pytest.mark.asyncio
async def test_request_id_is_echoed(public_client):
    response = await public_client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_request_id_is_generated(public_client):
    response = await public_client.get("/")

    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_store_failure_maps_to_generic_500(client, monkeypatch):
    monkeypatch.setattr(
        task_service,
        "list_tasks",
        AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("connection refused"))),
    )

    response = await client.get("/tasks")

    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}
    assert "connection refused" not in response.text


@pytest.mark.asyncio
async def test_unhandled_exception_returns_json_500(app, test_user, auth_headers, monkeypatch):
    monkeypatch.setattr(task_service, "create_task", AsyncMock(side_effect=RuntimeError("kaboom")))

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test", headers=auth_headers(test_user)) as client:
        response = await client.post("/tasks", json={"name": "x"})

    assert response.status_code == 500
    data = response.json()
    assert data["detail"] == "Something went wrong!"
    assert "trace" not in data
    assert "request_id" in data
    assert "kaboom" not in response.text


@pytest.mark.asyncio
async def test_unhandled_exception_shows_detail_in_debug(app, test_user, auth_headers, monkeypatch):
    app.state.settings = app.state.settings.model_copy(update={"debug": True})
    monkeypatch.setattr(task_service, "create_task", AsyncMock(side_effect=RuntimeError("kaboom")))

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test", headers=auth_headers(test_user)) as client:
        response = await client.post("/tasks", json={"name": "x"})

    assert response.status_code == 500
    assert response.json()["detail"] == "kaboom"
    assert "RuntimeError" in response.json()["trace"]


@pytest.mark.asyncio
async def test_malformed_json_is_400(client):
    response = await client.post(
        "/tasks",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["errors"]


def test_app_state_holds_configuration_snapshot(app, test_settings):
    assert app.state.settings is test_settings
    assert app.state.rate_limiters.enabled is False
