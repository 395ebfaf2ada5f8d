from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert

from schoolhub.core.repositories.base import Row, TenantTableRepository
from schoolhub.models.tenant_tables import academic_terms, classes

logger = logging.getLogger(__name__)


class AcademicTermRepository(TenantTableRepository):
    table = academic_terms

    async def save_term(
        self,
        *,
        name: str,
        starts_on: date,
        ends_on: date,
        metadata: dict[str, Any] | None = None,
    ) -> Row:
        statement = pg_insert(academic_terms).values(
            name=name,
            starts_on=starts_on,
            ends_on=ends_on,
            metadata=metadata or {},
        )
        statement = statement.on_conflict_do_update(
            index_elements=[academic_terms.c.name],
            set_={
                "starts_on": statement.excluded.starts_on,
                "ends_on": statement.excluded.ends_on,
                "metadata": statement.excluded["metadata"],
                "updated_at": func.now(),
            },
        ).returning(*academic_terms.c)
        row = await self._one(statement)
        if row is None:
            raise RuntimeError(f"Saving term into {self.qualified_name} returned no row")
        logger.info("[audit] term_saved schema=%s term=%s name=%s", self.schema_name, row["id"], name)
        return row

    async def list_terms(self) -> list[Row]:
        return await self._all(self._select().order_by(academic_terms.c.starts_on.desc()))


class ClassRepository(TenantTableRepository):
    table = classes

    async def save_class(
        self,
        *,
        name: str,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Row:
        statement = pg_insert(classes).values(
            name=name,
            description=description,
            metadata=metadata or {},
        )
        statement = statement.on_conflict_do_update(
            index_elements=[classes.c.name],
            set_={
                "description": statement.excluded.description,
                "metadata": statement.excluded["metadata"],
                "updated_at": func.now(),
            },
        ).returning(*classes.c)
        row = await self._one(statement)
        if row is None:
            raise RuntimeError(f"Saving class into {self.qualified_name} returned no row")
        return row

    async def list_classes(self) -> list[Row]:
        return await self._all(self._select().order_by(classes.c.name))
