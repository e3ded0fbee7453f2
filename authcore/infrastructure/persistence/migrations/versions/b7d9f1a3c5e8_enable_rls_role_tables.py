"""enable RLS on tenant-scoped role tables

Revision ID: b7d9f1a3c5e8
Revises: a1c3e5f7b9d2
Create Date: 2025-07-28 10:40:02.551930

Policy: rows are visible when tenant_id equals
current_setting('app.current_tenant_id'), or when no tenant is bound
(tenant resolution, the expired-role sweep). tenant and person stay
unrestricted: resolution reads tenant before any tenant is bound, and global
principals have no tenant_id.
"""

from collections.abc import Sequence
from typing import Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b7d9f1a3c5e8"
down_revision: Union[str, Sequence[str], None] = "a1c3e5f7b9d2"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_SCOPED_TABLES = ["person_role", "custom_role"]

_POLICY = (
    "COALESCE(current_setting('app.current_tenant_id', true), '') = '' "
    "OR tenant_id = current_setting('app.current_tenant_id', true)"
)


def upgrade() -> None:
    for table in TENANT_SCOPED_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY tenant_isolation ON {table} "
            f"USING ({_POLICY}) WITH CHECK ({_POLICY})"
        )


def downgrade() -> None:
    for table in reversed(TENANT_SCOPED_TABLES):
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table}")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
