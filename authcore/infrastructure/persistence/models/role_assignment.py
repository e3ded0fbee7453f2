"""PersonRole ORM model and the permission rows attached to it."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from authcore.infrastructure.persistence.database import Base
from authcore.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TimestampMixin,
)


class PersonRole(MultiTenantModel, Base):
    """Role held by a person in a tenant. Table: person_role.

    role_type is a built-in role type or a CUSTOM_<id> marker. At most one
    active row per (person_id, tenant_id, role_type, company_id); removal and
    expiry set is_active False instead of deleting.
    """

    __tablename__ = "person_role"

    person_id: Mapped[str] = mapped_column(
        String, ForeignKey("person.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
    company_id: Mapped[str | None] = mapped_column(String, nullable=True)
    department_id: Mapped[str | None] = mapped_column(String, nullable=True)
    role_scope: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_by: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    valid_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    role_permissions: Mapped[list["RolePermission"]] = relationship(
        back_populates="person_role", cascade="all, delete-orphan"
    )
    advanced_permissions: Mapped[list["AdvancedPermission"]] = relationship(
        back_populates="person_role", cascade="all, delete-orphan"
    )

    __table_args__ = (
        # COALESCE so that two company-less rows collide (NULLs are distinct in unique indexes).
        Index(
            "uq_person_role_active",
            "person_id",
            "tenant_id",
            "role_type",
            func.coalesce(text("company_id"), text("''")),
            unique=True,
            postgresql_where=text("is_active"),
        ),
        Index("ix_person_role_person_active", "person_id", "is_active"),
    )


class RolePermission(CuidMixin, TimestampMixin, Base):
    """Direct permission toggle on a role assignment. Table: role_permission."""

    __tablename__ = "role_permission"

    person_role_id: Mapped[str] = mapped_column(
        String, ForeignKey("person_role.id", ondelete="CASCADE"), nullable=False, index=True
    )
    permission: Mapped[str] = mapped_column(String, nullable=False)
    is_granted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    person_role: Mapped[PersonRole] = relationship(back_populates="role_permissions")

    __table_args__ = (
        UniqueConstraint(
            "person_role_id", "permission", name="uq_role_permission_role_permission"
        ),
    )


class AdvancedPermission(CuidMixin, TimestampMixin, Base):
    """Per-resource permission on a role assignment. Table: advanced_permission.

    scope: global | tenant | own. allowed_fields is an ordered list (empty =
    all fields); conditions is a JSON object such as {"ownedBy": "self"}.
    """

    __tablename__ = "advanced_permission"

    person_role_id: Mapped[str] = mapped_column(
        String, ForeignKey("person_role.id", ondelete="CASCADE"), nullable=False, index=True
    )
    resource: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    scope: Mapped[str] = mapped_column(String, nullable=False, default="global")
    allowed_fields: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    conditions: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    person_role: Mapped[PersonRole] = relationship(
        back_populates="advanced_permissions"
    )

    __table_args__ = (
        Index("ix_advanced_permission_resource_action", "resource", "action"),
    )
