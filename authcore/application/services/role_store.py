"""Role assignment lifecycle: assign, remove, list, and expire person roles.

Holds no policy: which roles grant what is decided by PermissionEvaluator.
Data-layer errors propagate unchanged to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime

from authcore.application.dtos.role_assignment import (
    RoleAssignmentResult,
    RolePermissionGrant,
    SyntheticRoleAssignment,
    UserRole,
)
from authcore.application.interfaces.repositories import (
    ICustomRoleRepository,
    IPersonRepository,
    IRoleAssignmentRepository,
)
from authcore.domain.enums import RoleScope, RoleType, parse_custom_role_marker
from authcore.domain.exceptions import (
    DuplicateAssignmentException,
    PersonNotInTenantException,
    ResourceNotFoundException,
    SyntheticAssignmentError,
    ValidationException,
)
from authcore.domain.permissions import parse_permission
from authcore.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def derive_scope(
    role_type: str, company_id: str | None, department_id: str | None
) -> RoleScope:
    """GLOBAL for SUPER_ADMIN, else COMPANY, DEPARTMENT, or TENANT by the ids given."""
    if role_type == RoleType.SUPER_ADMIN:
        return RoleScope.GLOBAL
    if company_id:
        return RoleScope.COMPANY
    if department_id:
        return RoleScope.DEPARTMENT
    return RoleScope.TENANT


class RoleStore:
    """CRUD over person role assignments (person_role) for one session."""

    def __init__(
        self,
        role_repo: IRoleAssignmentRepository,
        person_repo: IPersonRepository,
        custom_role_repo: ICustomRoleRepository,
    ) -> None:
        self._roles = role_repo
        self._persons = person_repo
        self._custom_roles = custom_role_repo

    async def assign_role(
        self,
        person_id: str,
        tenant_id: str,
        role_type: str,
        *,
        company_id: str | None = None,
        department_id: str | None = None,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
        custom_permissions: list[str] | None = None,
    ) -> RoleAssignmentResult:
        """Create or refresh the active assignment for (person, tenant, role, company).

        Raises:
            PersonNotInTenantException: person missing, deleted, or outside tenant
                without a global role.
            ValidationException: unknown role type, dead custom role, or unknown
                permission in custom_permissions.
        """
        person = await self._persons.get_by_id(person_id)
        if person is None or (
            person.tenant_id != tenant_id and not person.global_role
        ):
            raise PersonNotInTenantException(person_id, tenant_id)
        await self._validate_role_type(role_type, tenant_id)
        grants = [
            RolePermissionGrant(permission=parse_permission(p).value, is_granted=True)
            for p in custom_permissions or []
        ]
        valid_until = ensure_utc(expires_at) if expires_at else None
        now = utc_now()

        existing = await self._roles.find_active(
            person_id, tenant_id, role_type, company_id
        )
        if existing is not None:
            assignment = await self._roles.refresh(
                existing.id,
                assigned_by=assigned_by,
                assigned_at=now,
                valid_until=valid_until,
            )
        else:
            try:
                assignment = await self._roles.create(
                    person_id=person_id,
                    tenant_id=tenant_id,
                    role_type=role_type,
                    company_id=company_id,
                    department_id=department_id,
                    role_scope=derive_scope(role_type, company_id, department_id),
                    assigned_by=assigned_by,
                    assigned_at=now,
                    valid_until=valid_until,
                )
            except DuplicateAssignmentException:
                # Lost the insert race: the winner's row is refreshed instead.
                winner = await self._roles.find_active(
                    person_id, tenant_id, role_type, company_id
                )
                if winner is None:
                    raise
                assignment = await self._roles.refresh(
                    winner.id,
                    assigned_by=assigned_by,
                    assigned_at=now,
                    valid_until=valid_until,
                )
        if grants:
            assignment = await self._roles.replace_role_permissions(
                assignment.id, grants
            )
        logger.info(
            "Role %s assigned to person %s in tenant %s (company=%s, by=%s)",
            role_type,
            person_id,
            tenant_id,
            company_id,
            assigned_by,
        )
        return assignment

    async def remove_role(
        self,
        person_id: str,
        tenant_id: str,
        role_type: str,
        company_id: str | None = None,
    ) -> bool:
        """Deactivate matching active assignments. True when at least one changed."""
        changed = await self._roles.deactivate(
            person_id, tenant_id, role_type, company_id
        )
        if changed:
            logger.info(
                "Role %s removed from person %s in tenant %s (%d row(s))",
                role_type,
                person_id,
                tenant_id,
                changed,
            )
        return changed > 0

    async def get_user_roles(
        self, person_id: str, tenant_id: str | None = None
    ) -> list[UserRole]:
        """Active, unexpired roles of a person, one per (role_type, company_id).

        Without a tenant filter the same role held in several tenants collapses
        to the first row returned.

        A global_role not already held as an assignment is prepended as a
        SyntheticRoleAssignment.
        """
        rows = await self._roles.get_active(person_id, tenant_id, utc_now())
        seen: set[tuple[str, str | None]] = set()
        roles: list[UserRole] = []
        for row in rows:
            key = (row.role_type, row.company_id)
            if key in seen:
                continue
            seen.add(key)
            roles.append(row)

        person = await self._persons.get_by_id(person_id)
        if person is not None and person.global_role:
            if not any(r.role_type == person.global_role for r in roles):
                roles.insert(
                    0,
                    SyntheticRoleAssignment(
                        person_id=person_id, role_type=person.global_role
                    ),
                )
        return roles

    async def cleanup_expired_roles(self) -> int:
        """Deactivate active assignments whose valid_until has passed."""
        count = await self._roles.deactivate_expired(utc_now())
        if count:
            logger.info("Deactivated %d expired role assignment(s)", count)
        return count

    async def get_users_by_role(
        self, role_type: str, tenant_id: str, company_id: str | None = None
    ) -> list[RoleAssignmentResult]:
        """Unexpired active assignments of role_type in tenant (optionally one company)."""
        return await self._roles.list_active_by_role(
            role_type, tenant_id, company_id, utc_now()
        )

    async def get_role_statistics(self, tenant_id: str) -> dict[str, int]:
        """Active assignment counts per role type in tenant."""
        return await self._roles.count_active_by_role_type(tenant_id, utc_now())

    async def get_assignment(self, assignment_id: str) -> RoleAssignmentResult:
        """Return a stored assignment (inactive included).

        Raises:
            SyntheticAssignmentError: id is a synthetic global-role id.
            ResourceNotFoundException: no such assignment.
        """
        if assignment_id.startswith("global-"):
            raise SyntheticAssignmentError(assignment_id.removeprefix("global-"))
        assignment = await self._roles.get_by_id(assignment_id)
        if assignment is None:
            raise ResourceNotFoundException("role_assignment", assignment_id)
        return assignment

    async def update_role_permissions(
        self, assignment: UserRole, grants: list[RolePermissionGrant]
    ) -> RoleAssignmentResult:
        """Replace the direct permission toggles of a stored assignment.

        Raises:
            SyntheticAssignmentError: assignment is a synthetic global role.
            UnknownPermissionException: a grant names an unknown permission.
        """
        if not assignment.persisted:
            raise SyntheticAssignmentError(assignment.person_id)
        normalized = [
            RolePermissionGrant(
                permission=parse_permission(g.permission).value,
                is_granted=g.is_granted,
            )
            for g in grants
        ]
        updated = await self._roles.replace_role_permissions(assignment.id, normalized)
        logger.info(
            "Replaced %d permission toggle(s) on assignment %s",
            len(normalized),
            assignment.id,
        )
        return updated

    async def _validate_role_type(self, role_type: str, tenant_id: str) -> None:
        if RoleType.from_value(role_type) is not None:
            return
        custom_role_id = parse_custom_role_marker(role_type)
        if custom_role_id is None:
            raise ValidationException(
                f"Unknown role type: {role_type}", field="role_type"
            )
        custom_role = await self._custom_roles.get_by_id(custom_role_id)
        if custom_role is None or custom_role.tenant_id != tenant_id:
            raise ValidationException(
                f"Custom role not found in tenant: {custom_role_id}",
                field="role_type",
            )
