from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql import Executable, Select

from schoolhub.core.tenancy.schema_names import (
    TENANT_SCHEMA_PLACEHOLDER,
    assert_valid_schema_name,
    qualified_table,
)

Row = dict[str, Any]


class TenantTableRepository:
    """CRUD over one table inside a tenant schema.

    The schema name is validated when the repository is built and again every
    time a statement is bound to it.
    """

    table: Table

    def __init__(self, connection: AsyncConnection, schema_name: str) -> None:
        self.connection = connection
        self.schema_name = assert_valid_schema_name(schema_name)

    @property
    def qualified_name(self) -> str:
        return qualified_table(self.schema_name, self.table.name)

    async def _bound(self) -> AsyncConnection:
        schema = assert_valid_schema_name(self.schema_name)
        return await self.connection.execution_options(
            schema_translate_map={TENANT_SCHEMA_PLACEHOLDER: schema}
        )

    async def _execute(self, statement: Executable) -> Result:
        bound = await self._bound()
        return await bound.execute(statement)

    def _select(self) -> Select:
        return select(self.table)

    async def _one(self, statement: Executable) -> Row | None:
        result = await self._execute(statement)
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def _all(self, statement: Executable) -> list[Row]:
        result = await self._execute(statement)
        return [dict(row) for row in result.mappings().all()]

    async def create(self, **values: object) -> Row:
        row = await self._one(insert(self.table).values(**values).returning(*self.table.c))
        if row is None:
            raise RuntimeError(f"Insert into {self.qualified_name} returned no row")
        return row

    async def get(self, entity_id: UUID) -> Row | None:
        return await self._one(self._select().where(self.table.c.id == entity_id))

    async def list(self, *, limit: int = 100, offset: int = 0) -> list[Row]:
        return await self._all(self._select().limit(limit).offset(offset))

    async def update(self, entity_id: UUID, **values: object) -> Row | None:
        payload = {field: value for field, value in values.items() if field != "id"}
        if not payload:
            return await self.get(entity_id)
        return await self._one(
            update(self.table)
            .where(self.table.c.id == entity_id)
            .values(**payload)
            .returning(*self.table.c)
        )

    async def delete(self, entity_id: UUID) -> bool:
        result = await self._execute(delete(self.table).where(self.table.c.id == entity_id))
        return (result.rowcount or 0) > 0
