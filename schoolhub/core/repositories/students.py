from __future__ import annotations

from uuid import UUID

from schoolhub.core.repositories.base import Row, TenantTableRepository
from schoolhub.models.tenant_tables import students


class StudentRepository(TenantTableRepository):
    table = students

    async def list_students(
        self,
        *,
        class_id: UUID | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Row]:
        statement = self._select().order_by(students.c.last_name, students.c.first_name)
        if class_id is not None:
            statement = statement.where(students.c.class_id == class_id)
        return await self._all(statement.limit(limit).offset(offset))

    async def get_by_user_id(self, user_id: UUID) -> Row | None:
        return await self._one(self._select().where(students.c.user_id == user_id))
