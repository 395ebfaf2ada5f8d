"""create shared schema with tenant registry and users

Revision ID: 20261019_00
Revises:
Create Date: 2026-10-19 09:00:00

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261019_00"
down_revision = None
branch_labels = None
depends_on = None

SHARED_SCHEMA = "shared"


def upgrade() -> None:
    op.execute(sa.schema.CreateSchema(SHARED_SCHEMA, if_not_exists=True))

    op.create_table(
        "tenants",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("schema_name", sa.String(length=63), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('active', 'suspended')", name="ck_tenants_status"),
        schema=SHARED_SCHEMA,
    )
    op.create_index("ix_shared_tenants_schema_name", "tenants", ["schema_name"], unique=True, schema=SHARED_SCHEMA)
    op.create_index("ix_shared_tenants_status", "tenants", ["status"], unique=False, schema=SHARED_SCHEMA)

    op.create_table(
        "users",
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], [f"{SHARED_SCHEMA}.tenants.id"]),
        sa.UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        sa.CheckConstraint(
            "tenant_id IS NOT NULL OR role = 'superadmin'",
            name="ck_users_tenant_binding",
        ),
        schema=SHARED_SCHEMA,
    )
    op.create_index("ix_shared_users_email", "users", ["email"], unique=False, schema=SHARED_SCHEMA)
    op.create_index("ix_shared_users_tenant_id", "users", ["tenant_id"], unique=False, schema=SHARED_SCHEMA)

    op.alter_column("users", "is_verified", server_default=None, schema=SHARED_SCHEMA)


def downgrade() -> None:
    op.drop_index("ix_shared_users_tenant_id", table_name="users", schema=SHARED_SCHEMA)
    op.drop_index("ix_shared_users_email", table_name="users", schema=SHARED_SCHEMA)
    op.drop_table("users", schema=SHARED_SCHEMA)

    op.drop_index("ix_shared_tenants_status", table_name="tenants", schema=SHARED_SCHEMA)
    op.drop_index("ix_shared_tenants_schema_name", table_name="tenants", schema=SHARED_SCHEMA)
    op.drop_table("tenants", schema=SHARED_SCHEMA)
