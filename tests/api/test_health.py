"""Tests for the health endpoint. No tenant and no authentication required."""

from httpx import AsyncClient

from authcore.application.services.permission_catalog import CATALOG_VERSION


async def test_health_returns_200(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["catalog_version"] == CATALOG_VERSION


async def test_health_is_reachable_from_unknown_host(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/health", headers={"host": "nobody.example.org"}
    )
    assert response.status_code == 200
