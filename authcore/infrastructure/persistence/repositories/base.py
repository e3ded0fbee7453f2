"""Base repository: session and model binding shared by the concrete repositories."""

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from authcore.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository holding the session and the model it serves.

    Subclasses expose application DTOs; ORM instances stay inside the
    infrastructure layer.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and flush so defaults and id are set."""
        self.db.add(obj)
        await self.db.flush()
        return obj
