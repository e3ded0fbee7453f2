"""Person repository (read-only, non-deleted persons). Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.application.dtos.person import PersonResult
from authcore.infrastructure.persistence.models.person import Person
from authcore.infrastructure.persistence.repositories.base import BaseRepository


def _person_to_result(p: Person) -> PersonResult:
    return PersonResult(
        id=p.id,
        tenant_id=p.tenant_id,
        company_id=p.company_id,
        department_id=p.department_id,
        global_role=p.global_role,
        email=p.email,
    )


class PersonRepository(BaseRepository[Person]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Person)

    async def get_by_id(self, person_id: str) -> PersonResult | None:
        """Return person by ID; soft-deleted persons are treated as missing."""
        result = await self.db.execute(
            select(Person).where(Person.id == person_id, Person.deleted_at.is_(None))
        )
        person = result.scalar_one_or_none()
        return _person_to_result(person) if person else None
