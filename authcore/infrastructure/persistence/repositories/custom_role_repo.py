"""Custom role repository (live roles only). Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from authcore.application.dtos.custom_role import CustomRoleResult
from authcore.infrastructure.persistence.models.custom_role import CustomRole
from authcore.infrastructure.persistence.repositories.base import BaseRepository


def _custom_role_to_result(r: CustomRole) -> CustomRoleResult:
    return CustomRoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        name=r.name,
        description=r.description,
        permissions=frozenset(p.permission for p in r.permissions),
    )


class CustomRoleRepository(BaseRepository[CustomRole]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CustomRole)

    async def get_by_id(self, custom_role_id: str) -> CustomRoleResult | None:
        roles = await self.get_by_ids({custom_role_id})
        return roles[0] if roles else None

    async def get_by_ids(self, custom_role_ids: set[str]) -> list[CustomRoleResult]:
        """Return live custom roles with their permissions (batch)."""
        if not custom_role_ids:
            return []
        result = await self.db.execute(
            select(CustomRole)
            .options(selectinload(CustomRole.permissions))
            .where(
                CustomRole.id.in_(custom_role_ids),
                CustomRole.deleted_at.is_(None),
            )
        )
        return [_custom_role_to_result(r) for r in result.scalars().all()]
