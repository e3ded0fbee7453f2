"""Tenant repository: active, non-deleted tenant lookups. Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from authcore.application.dtos.tenant import TenantResult
from authcore.infrastructure.persistence.models.tenant import Tenant
from authcore.infrastructure.persistence.repositories.base import BaseRepository


def _tenant_to_result(t: Tenant) -> TenantResult:
    """Map ORM Tenant to application TenantResult."""
    return TenantResult(
        id=t.id,
        slug=t.slug,
        name=t.name,
        domain=t.domain,
        is_active=t.is_active,
        created_at=t.created_at,
    )


class TenantRepository(BaseRepository[Tenant]):
    """Tenant lookups used by tenant resolution (never writes)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    @staticmethod
    def _live() -> Select:
        return select(Tenant).where(
            Tenant.is_active.is_(True), Tenant.deleted_at.is_(None)
        )

    async def _first(self, stmt: Select) -> TenantResult | None:
        result = await self.db.execute(stmt.order_by(Tenant.created_at.asc()).limit(1))
        tenant = result.scalar_one_or_none()
        return _tenant_to_result(tenant) if tenant else None

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        return await self._first(self._live().where(Tenant.id == tenant_id))

    async def get_by_domain(self, domain: str) -> TenantResult | None:
        return await self._first(
            self._live().where(func.lower(Tenant.domain) == domain.lower())
        )

    async def get_by_slug(self, slug: str) -> TenantResult | None:
        return await self._first(self._live().where(Tenant.slug == slug))

    async def get_by_id_or_slug(self, identifier: str) -> TenantResult | None:
        return await self._first(
            self._live().where(or_(Tenant.id == identifier, Tenant.slug == identifier))
        )

    async def get_first_by_name_containing(self, fragment: str) -> TenantResult | None:
        return await self._first(
            self._live().where(Tenant.name.ilike(f"%{fragment}%"))
        )

    async def get_oldest(self) -> TenantResult | None:
        return await self._first(self._live())
