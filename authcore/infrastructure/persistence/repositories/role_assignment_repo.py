"""PersonRole repository: role assignments with their permission rows.

Returns application DTOs with role_permissions and advanced_permissions
eagerly loaded (selectinload), so services never touch lazy ORM attributes.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from authcore.application.dtos.role_assignment import (
    AdvancedPermissionGrant,
    RoleAssignmentResult,
    RolePermissionGrant,
)
from authcore.domain.conditions import parse_conditions
from authcore.domain.enums import AdvancedScope, RoleScope
from authcore.domain.exceptions import (
    DuplicateAssignmentException,
    ResourceNotFoundException,
)
from authcore.infrastructure.persistence.models.role_assignment import (
    AdvancedPermission,
    PersonRole,
    RolePermission,
)
from authcore.infrastructure.persistence.repositories.base import BaseRepository
from authcore.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _scope_or_none(value: str | None) -> RoleScope | None:
    try:
        return RoleScope(value) if value else None
    except ValueError:
        return None


def _advanced_to_grant(a: AdvancedPermission) -> AdvancedPermissionGrant | None:
    try:
        scope = AdvancedScope(a.scope)
    except ValueError:
        logger.warning(
            "Ignoring advanced permission %s with unknown scope %r", a.id, a.scope
        )
        return None
    return AdvancedPermissionGrant(
        id=a.id,
        resource=a.resource,
        action=a.action,
        scope=scope,
        allowed_fields=tuple(a.allowed_fields or ()),
        conditions=parse_conditions(a.conditions),
    )


def _role_to_result(r: PersonRole) -> RoleAssignmentResult:
    """Map ORM PersonRole (relationships loaded) to RoleAssignmentResult."""
    advanced = tuple(
        g for g in (_advanced_to_grant(a) for a in r.advanced_permissions) if g
    )
    return RoleAssignmentResult(
        id=r.id,
        person_id=r.person_id,
        tenant_id=r.tenant_id,
        role_type=r.role_type,
        company_id=r.company_id,
        department_id=r.department_id,
        role_scope=_scope_or_none(r.role_scope),
        assigned_by=r.assigned_by,
        assigned_at=ensure_utc(r.assigned_at),
        valid_until=ensure_utc(r.valid_until),
        is_active=r.is_active,
        role_permissions=tuple(
            RolePermissionGrant(permission=p.permission, is_granted=p.is_granted)
            for p in r.role_permissions
        ),
        advanced_permissions=advanced,
    )


def _company_clause(company_id: str | None):
    if company_id is None:
        return PersonRole.company_id.is_(None)
    return PersonRole.company_id == company_id


def _unexpired(now: datetime):
    return or_(PersonRole.valid_until.is_(None), PersonRole.valid_until > now)


class RoleAssignmentRepository(BaseRepository[PersonRole]):
    """person_role rows. Deactivation is an update; rows are never deleted."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PersonRole)

    @staticmethod
    def _loaded() -> Select:
        return select(PersonRole).options(
            selectinload(PersonRole.role_permissions),
            selectinload(PersonRole.advanced_permissions),
        )

    async def _all(self, stmt: Select) -> list[RoleAssignmentResult]:
        result = await self.db.execute(
            stmt.execution_options(populate_existing=True)
        )
        return [_role_to_result(r) for r in result.scalars().all()]

    async def _require(self, assignment_id: str) -> RoleAssignmentResult:
        rows = await self._all(self._loaded().where(PersonRole.id == assignment_id))
        if not rows:
            raise ResourceNotFoundException("role_assignment", assignment_id)
        return rows[0]

    async def get_by_id(self, assignment_id: str) -> RoleAssignmentResult | None:
        rows = await self._all(self._loaded().where(PersonRole.id == assignment_id))
        return rows[0] if rows else None

    async def get_active(
        self, person_id: str, tenant_id: str | None, now: datetime
    ) -> list[RoleAssignmentResult]:
        stmt = self._loaded().where(
            PersonRole.person_id == person_id,
            PersonRole.is_active.is_(True),
            _unexpired(now),
        )
        if tenant_id is not None:
            stmt = stmt.where(PersonRole.tenant_id == tenant_id)
        return await self._all(
            stmt.order_by(PersonRole.role_type.asc(), PersonRole.assigned_at.desc())
        )

    async def find_active(
        self,
        person_id: str,
        tenant_id: str,
        role_type: str,
        company_id: str | None,
    ) -> RoleAssignmentResult | None:
        rows = await self._all(
            self._loaded()
            .where(
                PersonRole.person_id == person_id,
                PersonRole.tenant_id == tenant_id,
                PersonRole.role_type == role_type,
                _company_clause(company_id),
                PersonRole.is_active.is_(True),
            )
            .order_by(PersonRole.assigned_at.desc())
            .limit(1)
        )
        return rows[0] if rows else None

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
        row = PersonRole(
            person_id=person_id,
            tenant_id=tenant_id,
            role_type=role_type,
            company_id=company_id,
            department_id=department_id,
            role_scope=role_scope.value,
            assigned_by=assigned_by,
            assigned_at=assigned_at,
            valid_until=valid_until,
            is_active=True,
        )
        try:
            # Savepoint: a lost unique race must not poison the outer transaction.
            async with self.db.begin_nested():
                await self.add(row)
        except IntegrityError:
            raise DuplicateAssignmentException(
                "Role already assigned to person",
                assignment_type="person_role",
                details_extra={
                    "person_id": person_id,
                    "tenant_id": tenant_id,
                    "role_type": role_type,
                    "company_id": company_id,
                },
            ) from None
        return await self._require(row.id)

    async def refresh(
        self,
        assignment_id: str,
        *,
        assigned_by: str | None,
        assigned_at: datetime,
        valid_until: datetime | None,
    ) -> RoleAssignmentResult:
        await self.db.execute(
            update(PersonRole)
            .where(PersonRole.id == assignment_id)
            .values(
                assigned_by=assigned_by,
                assigned_at=assigned_at,
                valid_until=valid_until,
            )
            .execution_options(synchronize_session=False)
        )
        return await self._require(assignment_id)

    async def deactivate(
        self,
        person_id: str,
        tenant_id: str,
        role_type: str,
        company_id: str | None,
    ) -> int:
        result = await self.db.execute(
            update(PersonRole)
            .where(
                PersonRole.person_id == person_id,
                PersonRole.tenant_id == tenant_id,
                PersonRole.role_type == role_type,
                _company_clause(company_id),
                PersonRole.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def deactivate_expired(self, now: datetime) -> int:
        result = await self.db.execute(
            update(PersonRole)
            .where(
                PersonRole.is_active.is_(True),
                PersonRole.valid_until.is_not(None),
                PersonRole.valid_until < now,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def replace_role_permissions(
        self, assignment_id: str, grants: list[RolePermissionGrant]
    ) -> RoleAssignmentResult:
        await self.db.execute(
            delete(RolePermission)
            .where(RolePermission.person_role_id == assignment_id)
            .execution_options(synchronize_session=False)
        )
        # Last toggle wins when the same permission is listed twice.
        by_permission = {g.permission: g.is_granted for g in grants}
        self.db.add_all(
            RolePermission(
                person_role_id=assignment_id,
                permission=permission,
                is_granted=is_granted,
            )
            for permission, is_granted in by_permission.items()
        )
        await self.db.flush()
        return await self._require(assignment_id)

    async def list_active_by_role(
        self,
        role_type: str,
        tenant_id: str,
        company_id: str | None,
        now: datetime,
    ) -> list[RoleAssignmentResult]:
        stmt = self._loaded().where(
            PersonRole.role_type == role_type,
            PersonRole.tenant_id == tenant_id,
            PersonRole.is_active.is_(True),
            _unexpired(now),
        )
        if company_id is not None:
            stmt = stmt.where(PersonRole.company_id == company_id)
        return await self._all(stmt.order_by(PersonRole.assigned_at.desc()))

    async def count_active_by_role_type(
        self, tenant_id: str, now: datetime
    ) -> dict[str, int]:
        result = await self.db.execute(
            select(PersonRole.role_type, func.count(PersonRole.id))
            .where(
                PersonRole.tenant_id == tenant_id,
                PersonRole.is_active.is_(True),
                _unexpired(now),
            )
            .group_by(PersonRole.role_type)
        )
        return {role_type: count for role_type, count in result.all()}
