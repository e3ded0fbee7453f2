"""Application DTOs (no ORM dependency)."""

from authcore.application.dtos.custom_role import CustomRoleResult
from authcore.application.dtos.decision import PermissionContext, PermissionDecision
from authcore.application.dtos.person import PersonResult
from authcore.application.dtos.role_assignment import (
    AdvancedPermissionGrant,
    RoleAssignmentResult,
    RolePermissionGrant,
    SyntheticRoleAssignment,
    UserRole,
)
from authcore.application.dtos.tenant import (
    BypassedTenant,
    DeniedTenant,
    ResolvedTenant,
    TenantResolution,
    TenantResult,
)

__all__ = [
    "AdvancedPermissionGrant",
    "BypassedTenant",
    "CustomRoleResult",
    "DeniedTenant",
    "PermissionContext",
    "PermissionDecision",
    "PersonResult",
    "ResolvedTenant",
    "RoleAssignmentResult",
    "RolePermissionGrant",
    "SyntheticRoleAssignment",
    "TenantResolution",
    "TenantResult",
    "UserRole",
]
