"""CustomRole ORM model: tenant-defined role with a set of permission strings."""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.infrastructure.persistence.database import Base
from authcore.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    SoftDeleteMixin,
    TimestampMixin,
)


class CustomRole(MultiTenantModel, SoftDeleteMixin, Base):
    """Custom role. Table: custom_role. Held via person_role.role_type = CUSTOM_<id>."""

    __tablename__ = "custom_role"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    permissions: Mapped[list["CustomRolePermission"]] = relationship(
        back_populates="custom_role", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_custom_role_tenant_name"),
    )


class CustomRolePermission(CuidMixin, TimestampMixin, Base):
    """Permission string held by a custom role. Table: custom_role_permission."""

    __tablename__ = "custom_role_permission"

    custom_role_id: Mapped[str] = mapped_column(
        String, ForeignKey("custom_role.id", ondelete="CASCADE"), nullable=False, index=True
    )
    permission: Mapped[str] = mapped_column(String, nullable=False)

    custom_role: Mapped[CustomRole] = relationship(back_populates="permissions")

    __table_args__ = (
        UniqueConstraint(
            "custom_role_id", "permission", name="uq_custom_role_permission"
        ),
    )
