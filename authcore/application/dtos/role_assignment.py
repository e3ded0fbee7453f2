"""DTOs for role assignments and their attached grants (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from authcore.domain.conditions import Condition
from authcore.domain.enums import AdvancedScope, RoleScope


@dataclass(frozen=True)
class RolePermissionGrant:
    """Direct (permission, is_granted) toggle on a stored assignment."""

    permission: str
    is_granted: bool = True


@dataclass(frozen=True)
class AdvancedPermissionGrant:
    """Per-resource permission row. Empty allowed_fields means all fields."""

    id: str
    resource: str
    action: str
    scope: AdvancedScope
    allowed_fields: tuple[str, ...] = ()
    conditions: tuple[Condition, ...] = ()


@dataclass(frozen=True)
class RoleAssignmentResult:
    """Stored person_role row with its role and advanced permissions loaded."""

    persisted: ClassVar[bool] = True

    id: str
    person_id: str
    tenant_id: str
    role_type: str
    company_id: str | None
    department_id: str | None
    role_scope: RoleScope | None
    assigned_by: str | None
    assigned_at: datetime | None
    valid_until: datetime | None
    is_active: bool
    role_permissions: tuple[RolePermissionGrant, ...] = ()
    advanced_permissions: tuple[AdvancedPermissionGrant, ...] = ()


@dataclass(frozen=True)
class SyntheticRoleAssignment:
    """A person's global_role presented as an assignment.

    Joins permission evaluation like any held role but has no database
    identity: RoleStore refuses to mutate it.
    """

    persisted: ClassVar[bool] = False

    person_id: str
    role_type: str
    role_scope: RoleScope = RoleScope.GLOBAL
    tenant_id: str | None = None
    company_id: str | None = None
    department_id: str | None = None
    is_active: bool = True
    assigned_by: str | None = None
    assigned_at: datetime | None = None
    valid_until: datetime | None = None
    role_permissions: tuple[RolePermissionGrant, ...] = ()
    advanced_permissions: tuple[AdvancedPermissionGrant, ...] = ()

    @property
    def id(self) -> str:
        """Display id only; never a person_role primary key."""
        return f"global-{self.person_id}"


UserRole = RoleAssignmentResult | SyntheticRoleAssignment
