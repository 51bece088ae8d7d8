"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

NON_TERMINAL = "status IN ('pending', 'accepted')"


def upgrade() -> None:
    # 1. Users table (identity projection)
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("full_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("avatar_url", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # 2. Companies table
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("owner_user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_companies_name", "companies", ["name"], unique=False)
    op.create_index("ix_companies_owner_user_id", "companies", ["owner_user_id"], unique=False)

    # 3. Memberships and invitations
    op.create_table(
        "company_memberships",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column(
            "role",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="viewer",
        ),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("invited_email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("invited_by", sa.Uuid(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["companies.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["invited_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_company_memberships_tenant_id", "company_memberships", ["tenant_id"], unique=False
    )
    op.create_index(
        "ix_company_memberships_user_id", "company_memberships", ["user_id"], unique=False
    )

    # At most one pending/accepted row per (company, address) and (company, user)
    op.create_index(
        "uq_company_memberships_active_email",
        "company_memberships",
        ["tenant_id", "invited_email"],
        unique=True,
        postgresql_where=sa.text(f"{NON_TERMINAL} AND invited_email IS NOT NULL"),
        sqlite_where=sa.text(f"{NON_TERMINAL} AND invited_email IS NOT NULL"),
    )
    op.create_index(
        "uq_company_memberships_active_user",
        "company_memberships",
        ["tenant_id", "user_id"],
        unique=True,
        postgresql_where=sa.text(f"{NON_TERMINAL} AND user_id IS NOT NULL"),
        sqlite_where=sa.text(f"{NON_TERMINAL} AND user_id IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_company_memberships_active_user", table_name="company_memberships")
    op.drop_index("uq_company_memberships_active_email", table_name="company_memberships")
    op.drop_index("ix_company_memberships_user_id", table_name="company_memberships")
    op.drop_index("ix_company_memberships_tenant_id", table_name="company_memberships")
    op.drop_table("company_memberships")
    op.drop_index("ix_companies_owner_user_id", table_name="companies")
    op.drop_index("ix_companies_name", table_name="companies")
    op.drop_table("companies")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
