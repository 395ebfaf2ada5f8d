from __future__ import annotations

from typing import Any

from schoolhub.core.repositories.base import Row, TenantTableRepository
from schoolhub.models.tenant_tables import schools


class SchoolRepository(TenantTableRepository):
    table = schools

    async def get_school(self) -> Row | None:
        return await self._one(self._select().order_by(schools.c.created_at).limit(1))

    async def upsert_school(self, *, name: str | None, address: dict[str, Any] | None) -> Row:
        existing = await self.get_school()
        if existing is None:
            return await self.create(name=name, address=address or {})

        updated = await self.update(
            existing["id"],
            name=name or existing["name"],
            address=address if address is not None else existing["address"] or {},
        )
        return updated or existing
