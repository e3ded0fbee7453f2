"""Person ORM model. tenant_id is nullable for global principals."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from authcore.infrastructure.persistence.database import Base
from authcore.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Person(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Person. Table: person."""

    __tablename__ = "person"

    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="SET NULL"), nullable=True, index=True
    )
    company_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    department_id: Mapped[str | None] = mapped_column(String, nullable=True)
    global_role: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
