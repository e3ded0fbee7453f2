"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from authcore.application.dtos.custom_role import CustomRoleResult
    from authcore.application.dtos.person import PersonResult
    from authcore.application.dtos.role_assignment import (
        RoleAssignmentResult,
        RolePermissionGrant,
    )
    from authcore.application.dtos.tenant import TenantResult
    from authcore.domain.enums import RoleScope


# Tenant repository interface
class ITenantRepository(Protocol):
    """Protocol for tenant lookups (active, non-deleted tenants only)."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by ID."""

    async def get_by_domain(self, domain: str) -> TenantResult | None:
        """Return tenant whose domain equals domain (lower-cased)."""

    async def get_by_slug(self, slug: str) -> TenantResult | None:
        """Return tenant by slug."""

    async def get_by_id_or_slug(self, identifier: str) -> TenantResult | None:
        """Return tenant whose id or slug equals identifier."""

    async def get_first_by_name_containing(self, fragment: str) -> TenantResult | None:
        """Return the oldest tenant whose name contains fragment (case-insensitive)."""

    async def get_oldest(self) -> TenantResult | None:
        """Return the oldest tenant by created_at."""


# Person repository interface
class IPersonRepository(Protocol):
    """Protocol for person lookups (non-deleted persons only)."""

    async def get_by_id(self, person_id: str) -> PersonResult | None:
        """Return person by ID."""


# Role assignment repository interface
class IRoleAssignmentRepository(Protocol):
    """Protocol for person_role rows and their attached permissions."""

    async def get_by_id(self, assignment_id: str) -> RoleAssignmentResult | None:
        """Return assignment by ID (inactive rows included)."""

    async def get_active(
        self, person_id: str, tenant_id: str | None, now: datetime
    ) -> list[RoleAssignmentResult]:
        """Return active rows with valid_until unset or after now.

        Optional tenant filter. Ordered by role_type asc, assigned_at desc.
        """

    async def find_active(
        self,
        person_id: str,
        tenant_id: str,
        role_type: str,
        company_id: str | None,
    ) -> RoleAssignmentResult | None:
        """Return the active row for the uniqueness tuple, if any."""

    async def create(
        self,
        *,
        person_id: str,
        tenant_id: str,
        role_type: str,
        company_id: str | None,
        department_id: str | None,
        role_scope: RoleScope,
        assigned_by: str | None,
        assigned_at: datetime,
        valid_until: datetime | None,
    ) -> RoleAssignmentResult:
        """Insert an active row.

        Raises DuplicateAssignmentException when an active row for the same
        (person_id, tenant_id, role_type, company_id) was inserted concurrently.
        """

    async def refresh(
        self,
        assignment_id: str,
        *,
        assigned_by: str | None,
        assigned_at: datetime,
        valid_until: datetime | None,
    ) -> RoleAssignmentResult:
        """Update assigned_by, assigned_at, valid_until of an existing row."""

    async def deactivate(
        self,
        person_id: str,
        tenant_id: str,
        role_type: str,
        company_id: str | None,
    ) -> int:
        """Set is_active False on matching active rows; return rows changed."""

    async def deactivate_expired(self, now: datetime) -> int:
        """Set is_active False on active rows with valid_until < now; return count."""

    async def replace_role_permissions(
        self, assignment_id: str, grants: list[RolePermissionGrant]
    ) -> RoleAssignmentResult:
        """Replace the RolePermission rows of an assignment."""

    async def list_active_by_role(
        self,
        role_type: str,
        tenant_id: str,
        company_id: str | None,
        now: datetime,
    ) -> list[RoleAssignmentResult]:
        """Return unexpired active rows holding role_type in tenant (optional company)."""

    async def count_active_by_role_type(
        self, tenant_id: str, now: datetime
    ) -> dict[str, int]:
        """Return unexpired active row counts per role_type in tenant."""


# Custom role repository interface
class ICustomRoleRepository(Protocol):
    """Protocol for tenant custom roles (non-deleted only)."""

    async def get_by_id(self, custom_role_id: str) -> CustomRoleResult | None:
        """Return live custom role by ID."""

    async def get_by_ids(self, custom_role_ids: set[str]) -> list[CustomRoleResult]:
        """Return live custom roles for the given ids (batch)."""
