"""initial access control schema

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-19

Tables: tenant, tenant_role, tenant_role_permission, user_tenant_role.
Enables row-level security. Policy: only rows where tenant_id (or id for the
tenant table) equals current_setting('app.current_tenant_id'); grant rows are
visible through their role. Migrations and seed scripts should use a DB role
with BYPASSRLS; the app role must not.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_SCOPED_TABLES = ["tenant_role", "user_tenant_role"]

_TENANT_SETTING = "current_setting('app.current_tenant_id', true)"


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
    """Upgrade schema - tenant, roles, role grants, user-role assignments, RLS."""
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_tenant_code", "tenant", ["code"])

    op.create_table(
        "tenant_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_super_role", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "dashboard_scope", sa.String(), nullable=False, server_default="personal"
        ),
        sa.Column(
            "can_see_own_commissions", sa.Boolean(), nullable=False, server_default="true"
        ),
        sa.Column(
            "can_see_team_commissions", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "can_see_all_commissions", sa.Boolean(), nullable=False, server_default="false"
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tenant_id", "name", name="uq_tenant_role_tenant_name"),
        sa.CheckConstraint(
            "dashboard_scope IN ('personal', 'team', 'global')",
            name="tenant_role_dashboard_scope_check",
        ),
    )
    op.create_index("ix_tenant_role_tenant_id", "tenant_role", ["tenant_id"])

    op.create_table(
        "tenant_role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("module", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("allowed", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["tenant_role.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "role_id", "module", "action", name="uq_tenant_role_permission"
        ),
    )
    op.create_index(
        "ix_tenant_role_permission_role", "tenant_role_permission", ["role_id"]
    )

    op.create_table(
        "user_tenant_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("assigned_by", sa.String(), nullable=True),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["role_id"], ["tenant_role.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_tenant_role"),
    )
    op.create_index("ix_user_tenant_role_tenant_id", "user_tenant_role", ["tenant_id"])
    op.create_index(
        "ix_user_tenant_role_lookup", "user_tenant_role", ["tenant_id", "user_id"]
    )

    # Tenant table: each tenant sees only its own row
    op.execute("ALTER TABLE tenant ENABLE ROW LEVEL SECURITY")
    op.execute(
        "CREATE POLICY tenant_isolation ON tenant "
        f"USING (id = {_TENANT_SETTING}) "
        f"WITH CHECK (id = {_TENANT_SETTING})"
    )

    for table in TENANT_SCOPED_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY tenant_isolation ON {table} "
            f"USING (tenant_id = {_TENANT_SETTING}) "
            f"WITH CHECK (tenant_id = {_TENANT_SETTING})"
        )

    # Grant rows carry no tenant_id; they follow the visibility of their role
    op.execute("ALTER TABLE tenant_role_permission ENABLE ROW LEVEL SECURITY")
    op.execute(
        "CREATE POLICY tenant_isolation ON tenant_role_permission "
        "USING (role_id IN (SELECT id FROM tenant_role)) "
        "WITH CHECK (role_id IN (SELECT id FROM tenant_role))"
    )


def downgrade() -> None:
    """Downgrade schema - drop RLS policies and tables."""
    for table in ["tenant_role_permission", *reversed(TENANT_SCOPED_TABLES), "tenant"]:
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table}")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")

    op.drop_index("ix_user_tenant_role_lookup", table_name="user_tenant_role")
    op.drop_index("ix_user_tenant_role_tenant_id", table_name="user_tenant_role")
    op.drop_table("user_tenant_role")
    op.drop_index("ix_tenant_role_permission_role", table_name="tenant_role_permission")
    op.drop_table("tenant_role_permission")
    op.drop_index("ix_tenant_role_tenant_id", table_name="tenant_role")
    op.drop_table("tenant_role")
    op.drop_index("ix_tenant_code", table_name="tenant")
    op.drop_table("tenant")
