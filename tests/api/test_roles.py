"""Roles endpoints: catalog, statistics, expired-role sweep."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from authcore.application.services.permission_catalog import CATALOG_VERSION
from authcore.shared.utils.datetime import utc_now


@pytest.fixture
def staff(person_repo, role_repo):
    person_repo.add("p-admin", "t-acme", global_role="ADMIN")
    person_repo.add("p-hr", "t-acme")
    role_repo.seed("p-hr", "t-acme", "HR_MANAGER")
    role_repo.seed("p-a", "t-acme", "EMPLOYEE")
    role_repo.seed("p-b", "t-acme", "EMPLOYEE")
    role_repo.seed("p-c", "t-globex", "EMPLOYEE")
    return person_repo


async def test_catalog(client: AsyncClient, staff, bearer) -> None:
    response = await client.get("/api/v1/roles/catalog", headers=bearer("p-admin"))
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == CATALOG_VERSION
    assert data["roles"]["EMPLOYEE"] == ["VIEW_COURSES", "VIEW_SCHEDULES"]
    assert data["roles"]["GUEST"] == []


async def test_catalog_requires_view_roles(client: AsyncClient, staff, bearer) -> None:
    response = await client.get("/api/v1/roles/catalog", headers=bearer("p-hr"))
    assert response.status_code == 403


async def test_statistics_are_per_tenant(client: AsyncClient, staff, bearer) -> None:
    response = await client.get("/api/v1/roles/statistics", headers=bearer("p-admin"))
    assert response.status_code == 200
    assert response.json() == {
        "tenant_id": "t-acme",
        "counts": {"HR_MANAGER": 1, "EMPLOYEE": 2},
        "total": 3,
    }


async def test_cleanup_expired(client: AsyncClient, staff, role_repo, bearer) -> None:
    expired = role_repo.seed(
        "p-a", "t-acme", "VIEWER", valid_until=utc_now() - timedelta(days=1)
    )
    response = await client.post(
        "/api/v1/roles/cleanup-expired", headers=bearer("p-hr")
    )
    assert response.status_code == 200
    assert response.json() == {"deactivated": 1}
    assert not role_repo.rows[expired.id].is_active


async def test_cleanup_requires_role_management(
    client: AsyncClient, staff, person_repo, role_repo, bearer
) -> None:
    person_repo.add("p-a", "t-acme")
    response = await client.post("/api/v1/roles/cleanup-expired", headers=bearer("p-a"))
    assert response.status_code == 403
    assert response.json()["details"]["required"] == "ROLE_MANAGEMENT"
