"""Tests for health and readiness endpoints and the request id header."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data


async def test_ready_checks_database(client: AsyncClient) -> None:
    """GET /api/v1/health/ready answers the trivial query against the test database."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["database"] == "ok"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    """A safe X-Request-ID is echoed back; a missing one is generated."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
    generated = await client.get("/api/v1/health")
    assert generated.headers["X-Request-ID"]


async def test_security_headers_present(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
