from __future__ import annotations

from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.models.base import SharedBase


class TenantUser(SharedBase):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        # NULL tenant ids never collide in the constraint above.
        Index("uq_users_unbound_email", "email", unique=True, postgresql_where=text("tenant_id IS NULL")),
        CheckConstraint("tenant_id IS NOT NULL OR role = 'superadmin'", name="ck_users_tenant_binding"),
    )

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    tenant_id: Mapped[UUID | None] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("shared.tenants.id"), nullable=True, index=True
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
