"""Tests for health and root endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    """Basic health reports version and environment."""
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_detailed_health(client: AsyncClient) -> None:
    """Detailed health reports the database and a disabled cache."""
    response = await client.get("/api/v1/health/detailed")

    assert response.status_code == 200
    data = response.json()
    assert data["database"] == "healthy"
    assert data["cache"] == "disabled"
    assert data["clinic_timezone"] == "Asia/Kolkata"


@pytest.mark.asyncio
async def test_ping_and_root(client: AsyncClient) -> None:
    """Ping and root respond without dependencies."""
    assert (await client.get("/api/v1/ping")).json() == {"message": "pong"}

    response = await client.get("/")
    assert response.status_code == 200
    assert "version" in response.json()


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient) -> None:
    """Responses echo the caller's request id."""
    response = await client.get("/api/v1/ping", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Process-Time" in response.headers
