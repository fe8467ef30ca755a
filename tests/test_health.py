"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


async def test_liveness_endpoint(client: AsyncClient):
    """Test that liveness endpoint returns 200."""
    response = await client.get("/health/live")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "alive"


async def test_readiness_endpoint(client: AsyncClient):
    """Test that readiness endpoint returns 200 with healthy checks."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] == "ok"


async def test_info_endpoint(client: AsyncClient):
    """Test that info endpoint returns application metadata."""
    response = await client.get("/info")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == 200
    assert body["data"]["app"] == "Workforce API"
    assert "environment" in body["data"]


async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health/live", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.parametrize("path", ["/api/v1/tasks/my-tasks", "/api/v1/companies"])
async def test_protected_routes_need_token(client: AsyncClient, path: str):
    response = await client.get(path)

    assert response.status_code == 401
    body = response.json()
    assert body["status"] == 401
    assert body["instance"] == path
