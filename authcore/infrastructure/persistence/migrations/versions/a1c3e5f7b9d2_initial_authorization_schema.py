"""initial authorization schema

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2025-07-28 10:12:44.118203

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b9d2"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("domain", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain"),
    )
    op.create_index(op.f("ix_tenant_slug"), "tenant", ["slug"], unique=True)
    op.create_index(op.f("ix_tenant_is_active"), "tenant", ["is_active"])
    op.create_index(op.f("ix_tenant_deleted_at"), "tenant", ["deleted_at"])

    op.create_table(
        "person",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("company_id", sa.String(), nullable=True),
        sa.Column("department_id", sa.String(), nullable=True),
        sa.Column("global_role", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_person_tenant_id"), "person", ["tenant_id"])
    op.create_index(op.f("ix_person_company_id"), "person", ["company_id"])
    op.create_index(op.f("ix_person_deleted_at"), "person", ["deleted_at"])

    op.create_table(
        "person_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("person_id", sa.String(), nullable=False),
        sa.Column("role_type", sa.String(), nullable=False),
        sa.Column("company_id", sa.String(), nullable=True),
        sa.Column("department_id", sa.String(), nullable=True),
        sa.Column("role_scope", sa.String(), nullable=True),
        sa.Column("assigned_by", sa.String(), nullable=True),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["person_id"], ["person.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_person_role_tenant_id"), "person_role", ["tenant_id"])
    op.create_index(op.f("ix_person_role_person_id"), "person_role", ["person_id"])
    op.create_index(op.f("ix_person_role_role_type"), "person_role", ["role_type"])
    op.create_index(
        "ix_person_role_person_active", "person_role", ["person_id", "is_active"]
    )
    op.create_index(
        "uq_person_role_active",
        "person_role",
        [
            "person_id",
            "tenant_id",
            "role_type",
            sa.text("COALESCE(company_id, '')"),
        ],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("person_role_id", sa.String(), nullable=False),
        sa.Column("permission", sa.String(), nullable=False),
        sa.Column("is_granted", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["person_role_id"], ["person_role.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "person_role_id", "permission", name="uq_role_permission_role_permission"
        ),
    )
    op.create_index(
        op.f("ix_role_permission_person_role_id"), "role_permission", ["person_role_id"]
    )

    op.create_table(
        "advanced_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("person_role_id", sa.String(), nullable=False),
        sa.Column("resource", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("scope", sa.String(), nullable=False),
        sa.Column("allowed_fields", sa.JSON(), nullable=True),
        sa.Column("conditions", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["person_role_id"], ["person_role.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "scope IN ('global', 'tenant', 'own')",
            name="advanced_permission_scope_check",
        ),
    )
    op.create_index(
        op.f("ix_advanced_permission_person_role_id"),
        "advanced_permission",
        ["person_role_id"],
    )
    op.create_index(
        "ix_advanced_permission_resource_action",
        "advanced_permission",
        ["resource", "action"],
    )

    op.create_table(
        "custom_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "name", name="uq_custom_role_tenant_name"),
    )
    op.create_index(op.f("ix_custom_role_tenant_id"), "custom_role", ["tenant_id"])
    op.create_index(op.f("ix_custom_role_deleted_at"), "custom_role", ["deleted_at"])

    op.create_table(
        "custom_role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("custom_role_id", sa.String(), nullable=False),
        sa.Column("permission", sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["custom_role_id"], ["custom_role.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "custom_role_id", "permission", name="uq_custom_role_permission"
        ),
    )
    op.create_index(
        op.f("ix_custom_role_permission_custom_role_id"),
        "custom_role_permission",
        ["custom_role_id"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("custom_role_permission")
    op.drop_table("custom_role")
    op.drop_table("advanced_permission")
    op.drop_table("role_permission")
    op.drop_index("uq_person_role_active", table_name="person_role")
    op.drop_table("person_role")
    op.drop_table("person")
    op.drop_table("tenant")
