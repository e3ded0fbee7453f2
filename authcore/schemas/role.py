"""Role assignment API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from authcore.application.dtos.role_assignment import UserRole
from authcore.domain.conditions import conditions_to_json


class AdvancedPermissionResponse(BaseModel):
    """Advanced per-resource permission attached to an assignment."""

    id: str
    resource: str
    action: str
    scope: str
    allowed_fields: list[str]
    conditions: dict[str, Any]


class RolePermissionToggle(BaseModel):
    """Direct permission toggle (request and response)."""

    permission: str = Field(..., min_length=1, max_length=64)
    is_granted: bool = True


class RoleAssignmentResponse(BaseModel):
    """Role held by a person. persisted is False for a global role."""

    id: str
    person_id: str
    tenant_id: str | None
    role_type: str
    company_id: str | None
    department_id: str | None
    role_scope: str | None
    assigned_by: str | None
    assigned_at: datetime | None
    valid_until: datetime | None
    is_active: bool
    persisted: bool
    role_permissions: list[RolePermissionToggle] = Field(default_factory=list)
    advanced_permissions: list[AdvancedPermissionResponse] = Field(
        default_factory=list
    )

    @classmethod
    def from_role(cls, role: UserRole) -> "RoleAssignmentResponse":
        return cls(
            id=role.id,
            person_id=role.person_id,
            tenant_id=role.tenant_id,
            role_type=role.role_type,
            company_id=role.company_id,
            department_id=role.department_id,
            role_scope=role.role_scope.value if role.role_scope else None,
            assigned_by=role.assigned_by,
            assigned_at=role.assigned_at,
            valid_until=role.valid_until,
            is_active=role.is_active,
            persisted=role.persisted,
            role_permissions=[
                RolePermissionToggle(permission=g.permission, is_granted=g.is_granted)
                for g in role.role_permissions
            ],
            advanced_permissions=[
                AdvancedPermissionResponse(
                    id=a.id,
                    resource=a.resource,
                    action=a.action,
                    scope=a.scope.value,
                    allowed_fields=list(a.allowed_fields),
                    conditions=conditions_to_json(a.conditions),
                )
                for a in role.advanced_permissions
            ],
        )


class RoleAssignRequest(BaseModel):
    """Request body for POST /persons/{person_id}/roles."""

    role_type: str = Field(..., min_length=1, max_length=64)
    company_id: str | None = None
    department_id: str | None = None
    expires_at: datetime | None = None
    custom_permissions: list[str] | None = Field(default=None, max_length=200)


class RolePermissionsUpdate(BaseModel):
    """Request body for PUT /persons/{person_id}/roles/{assignment_id}/permissions."""

    permissions: list[RolePermissionToggle] = Field(..., max_length=200)


class RoleCatalogResponse(BaseModel):
    """Default permission sets per built-in role type."""

    version: str
    roles: dict[str, list[str]]


class RoleStatisticsResponse(BaseModel):
    """Active assignment counts per role type in the current tenant."""

    tenant_id: str
    counts: dict[str, int]
    total: int


class CleanupResponse(BaseModel):
    """Result of an expired-role sweep."""

    deactivated: int
