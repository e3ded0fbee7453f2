"""Tenant resolution through the HTTP stack (TenantResolutionMiddleware)."""

from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError


async def test_current_tenant_by_domain(client: AsyncClient) -> None:
    response = await client.get("/api/v1/tenants/current")
    assert response.status_code == 200
    assert response.json() == {
        "id": "t-acme",
        "slug": "acme",
        "name": "Acme Corp",
        "domain": "acme.example.com",
    }


async def test_current_tenant_by_subdomain(client: AsyncClient, tenant_repo) -> None:
    tenant_repo.add("t-globex", "globex")
    response = await client.get(
        "/api/v1/tenants/current", headers={"host": "globex.example.com:8443"}
    )
    assert response.status_code == 200
    assert response.json()["id"] == "t-globex"


async def test_unknown_host_is_404_with_host_and_path(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/tenants/current", headers={"host": "nowhere.example.org"}
    )
    assert response.status_code == 404
    assert response.json() == {
        "error": "NO_TENANT",
        "message": "Tenant not found or inactive",
        "details": {"host": "nowhere.example.org", "path": "/api/v1/tenants/current"},
    }


async def test_loopback_header_selects_tenant(client: AsyncClient, tenant_repo) -> None:
    tenant_repo.add("t-globex", "globex")
    response = await client.get(
        "/api/v1/tenants/current",
        headers={"host": "localhost:8000", "X-Tenant-ID": "globex"},
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "globex"


async def test_loopback_query_param_selects_tenant(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/tenants/current",
        params={"tenantId": "t-acme"},
        headers={"host": "127.0.0.1"},
    )
    assert response.status_code == 200
    assert response.json()["id"] == "t-acme"


async def test_public_host_ignores_tenant_header(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/tenants/current",
        headers={"host": "evil.example.org", "X-Tenant-ID": "t-acme"},
    )
    assert response.status_code == 404


async def test_lookup_failure_is_500_without_detail(
    client: AsyncClient, tenant_repo, monkeypatch
) -> None:
    async def broken(domain):
        raise SQLAlchemyError("connection refused to db-primary:5432")

    monkeypatch.setattr(tenant_repo, "get_by_domain", broken)
    response = await client.get("/api/v1/tenants/current")
    assert response.status_code == 500
    assert response.json() == {"error": "DATA_LAYER_ERROR", "message": "Internal server error"}
