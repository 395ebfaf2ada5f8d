"""unique email for users not bound to a tenant

Revision ID: 20261019_01
Revises: 20261019_00
Create Date: 2026-10-19 15:30:00

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = "20261019_00"
branch_labels = None
depends_on = None

SHARED_SCHEMA = "shared"


def upgrade() -> None:
    op.create_index(
        "uq_users_unbound_email",
        "users",
        ["email"],
        unique=True,
        schema=SHARED_SCHEMA,
        postgresql_where=sa.text("tenant_id IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_users_unbound_email", table_name="users", schema=SHARED_SCHEMA)
