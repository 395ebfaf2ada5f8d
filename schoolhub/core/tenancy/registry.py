from __future__ import annotations

from collections.abc import AsyncGenerator
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.context import TenantRecord
from schoolhub.core.db import Database, get_database
from schoolhub.core.permissions import Role
from schoolhub.core.tenancy.errors import ValidationError
from schoolhub.core.tenancy.schema_names import assert_valid_schema_name
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.models.user import TenantUser


class TenantRegistry:
    """Typed access to ``shared.tenants``.

    This is the only place that turns an external tenant hint into a tenant
    record. Records are returned detached so they can outlive the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _get_model(self, tenant_id: UUID) -> Tenant | None:
        result = await self.session.execute(select(Tenant).where(Tenant.id == tenant_id))
        return result.scalar_one_or_none()

    async def get(self, tenant_id: UUID) -> TenantRecord | None:
        tenant = await self._get_model(tenant_id)
        return TenantRecord.from_model(tenant) if tenant is not None else None

    async def get_by_schema_name(self, schema_name: str) -> TenantRecord | None:
        result = await self.session.execute(select(Tenant).where(Tenant.schema_name == schema_name))
        tenant = result.scalar_one_or_none()
        return TenantRecord.from_model(tenant) if tenant is not None else None

    async def find_by_identifier(self, hint: str | UUID) -> TenantRecord | None:
        """Look a tenant up by id, or by schema name for operator convenience."""
        if isinstance(hint, UUID):
            return await self.get(hint)

        value = (hint or "").strip()
        if not value:
            return None

        try:
            return await self.get(UUID(value))
        except ValueError:
            pass

        try:
            schema_name = assert_valid_schema_name(value)
        except ValidationError:
            return None
        return await self.get_by_schema_name(schema_name)

    async def schema_name_taken(self, schema_name: str) -> bool:
        count = await self.session.scalar(
            select(func.count(Tenant.id)).where(Tenant.schema_name == schema_name)
        )
        return bool(count)

    async def create(self, *, name: str, schema_name: str) -> TenantRecord:
        tenant = Tenant(
            name=name,
            schema_name=assert_valid_schema_name(schema_name),
            status=TenantStatus.ACTIVE.value,
        )
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return TenantRecord.from_model(tenant)

    async def list(self, *, limit: int = 100, offset: int = 0) -> list[TenantRecord]:
        result = await self.session.execute(
            select(Tenant).order_by(Tenant.created_at).limit(limit).offset(offset)
        )
        return [TenantRecord.from_model(tenant) for tenant in result.scalars().all()]

    async def count(self) -> int:
        return int(await self.session.scalar(select(func.count(Tenant.id))) or 0)

    async def count_users(self, tenant_id: UUID) -> int:
        return int(
            await self.session.scalar(
                select(func.count(TenantUser.id)).where(TenantUser.tenant_id == tenant_id)
            )
            or 0
        )

    async def list_users(self, tenant_id: UUID, *, limit: int = 100, offset: int = 0) -> list[TenantUser]:
        result = await self.session.execute(
            select(TenantUser)
            .where(TenantUser.tenant_id == tenant_id)
            .order_by(TenantUser.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def update_user_role(self, tenant_id: UUID, user_id: UUID, role: Role) -> TenantUser | None:
        """Change the role of a user of ``tenant_id``; users of other tenants are not found."""
        result = await self.session.execute(
            select(TenantUser).where(TenantUser.id == user_id, TenantUser.tenant_id == tenant_id)
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None
        user.role = role.value
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update_status(self, tenant_id: UUID, status: TenantStatus) -> TenantRecord | None:
        tenant = await self._get_model(tenant_id)
        if tenant is None:
            return None
        tenant.status = status.value
        await self.session.flush()
        await self.session.refresh(tenant)
        return TenantRecord.from_model(tenant)

    async def rename(self, tenant_id: UUID, name: str) -> TenantRecord | None:
        tenant = await self._get_model(tenant_id)
        if tenant is None:
            return None
        tenant.name = name
        await self.session.flush()
        await self.session.refresh(tenant)
        return TenantRecord.from_model(tenant)


async def get_tenant_registry(
    database: Database = Depends(get_database),
) -> AsyncGenerator[TenantRegistry, None]:
    async with database.connect() as connection:
        async with database.session(connection) as session:
            yield TenantRegistry(session)
