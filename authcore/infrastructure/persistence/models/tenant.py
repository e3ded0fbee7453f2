"""Tenant ORM model. Root entity of the multi-tenant hierarchy (read-only here)."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from authcore.infrastructure.persistence.database import Base
from authcore.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Tenant(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Tenant. Table: tenant. Unique slug; unique (nullable) custom domain."""

    __tablename__ = "tenant"

    slug: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    domain: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
