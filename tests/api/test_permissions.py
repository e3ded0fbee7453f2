"""Permission check and field filter endpoints."""

import pytest
from httpx import AsyncClient

from authcore.application.dtos.role_assignment import AdvancedPermissionGrant
from authcore.domain.enums import AdvancedScope


@pytest.fixture
def trainer(person_repo, role_repo):
    person_repo.add("p-trainer", "t-acme")
    return role_repo.seed("p-trainer", "t-acme", "TRAINER")


async def test_check_granted_permission(client: AsyncClient, trainer, bearer) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permission": "view_courses"},
        headers=bearer("p-trainer"),
    )
    assert response.status_code == 200
    assert response.json() == {
        "granted": True,
        "permission": "VIEW_COURSES",
        "resource": None,
        "action": None,
        "source": "CATALOG",
    }


async def test_check_denied_permission(client: AsyncClient, trainer, bearer) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permission": "DELETE_COURSES"},
        headers=bearer("p-trainer"),
    )
    assert response.status_code == 200
    assert response.json()["granted"] is False
    assert response.json()["source"] == "DENIED"


async def test_check_unknown_permission_is_400(client: AsyncClient, trainer, bearer) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permission": "OPEN_POD_BAY_DOORS"},
        headers=bearer("p-trainer"),
    )
    assert response.status_code == 400
    assert response.json() == {
        "error": "UNKNOWN_PERMISSION",
        "message": "Unknown permission: OPEN_POD_BAY_DOORS",
        "details": {"permission": "OPEN_POD_BAY_DOORS"},
    }


async def test_check_resource_action(client: AsyncClient, trainer, bearer) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"resource": "courses", "action": "read"},
        headers=bearer("p-trainer"),
    )
    assert response.status_code == 200
    assert response.json()["granted"] is True
    assert response.json()["resource"] == "courses"


async def test_check_needs_permission_or_resource_action(
    client: AsyncClient, trainer, bearer
) -> None:
    response = await client.post(
        "/api/v1/permissions/check", json={"resource": "courses"}, headers=bearer("p-trainer")
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_check_requires_authentication(client: AsyncClient, trainer) -> None:
    response = await client.post(
        "/api/v1/permissions/check", json={"permission": "VIEW_COURSES"}
    )
    assert response.status_code == 401


async def test_filter_returns_all_fields_with_basic_permission(
    client: AsyncClient, trainer, bearer
) -> None:
    rows = [{"id": "e-1", "name": "Ada", "salary": 100}]
    response = await client.post(
        "/api/v1/permissions/filter",
        json={"resource": "employees", "data": rows},
        headers=bearer("p-trainer"),
    )
    assert response.status_code == 200
    assert response.json() == {"data": rows}


async def test_filter_projects_to_allowed_fields(
    client: AsyncClient, person_repo, role_repo, bearer
) -> None:
    person_repo.add("p-guest", "t-acme")
    role_repo.seed(
        "p-guest",
        "t-acme",
        "GUEST",
        advanced_permissions=[
            AdvancedPermissionGrant(
                id="ap-1",
                resource="employees",
                action="read",
                scope=AdvancedScope.OWN,
                allowed_fields=("name",),
            )
        ],
    )
    response = await client.post(
        "/api/v1/permissions/filter",
        json={"resource": "employees", "data": {"id": "e-1", "name": "Ada", "salary": 100}},
        headers=bearer("p-guest"),
    )
    assert response.status_code == 200
    assert response.json() == {"data": {"name": "Ada", "id": "e-1"}}


async def test_filter_without_access_is_403(client: AsyncClient, trainer, bearer) -> None:
    response = await client.post(
        "/api/v1/permissions/filter",
        json={"resource": "employees", "action": "delete", "data": []},
        headers=bearer("p-trainer"),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"
