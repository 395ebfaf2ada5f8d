from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from schoolhub.core.repositories.base import Row, TenantTableRepository
from schoolhub.models.tenant_tables import attendance_records

logger = logging.getLogger(__name__)

ATTENDANCE_STATUSES = ("present", "absent", "late")


@dataclass(slots=True)
class AttendanceMark:
    student_id: UUID
    status: str
    attendance_date: date
    class_id: UUID | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class AttendanceSummary:
    present: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.present / self.total * 100


class AttendanceRepository(TenantTableRepository):
    table = attendance_records

    async def mark(self, marks: list[AttendanceMark], *, marked_by: UUID) -> int:
        for mark in marks:
            if mark.status not in ATTENDANCE_STATUSES:
                raise ValueError(f"Unknown attendance status {mark.status!r}")

        for mark in marks:
            statement = pg_insert(attendance_records).values(
                student_id=mark.student_id,
                class_id=mark.class_id,
                status=mark.status,
                marked_by=marked_by,
                attendance_date=mark.attendance_date,
                metadata=mark.metadata,
            )
            statement = statement.on_conflict_do_update(
                constraint="uq_attendance_student_class_date",
                set_={
                    "status": statement.excluded.status,
                    "marked_by": statement.excluded.marked_by,
                    "metadata": statement.excluded["metadata"],
                    "recorded_at": func.now(),
                },
            )
            await self._execute(statement)

        if marks:
            dates = sorted(mark.attendance_date for mark in marks)
            logger.info(
                "[audit] attendance_mark schema=%s count=%s from=%s to=%s",
                self.schema_name,
                len(marks),
                dates[0],
                dates[-1],
            )
        return len(marks)

    async def student_history(
        self,
        student_id: UUID,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Row]:
        statement = self._select().where(attendance_records.c.student_id == student_id)
        if date_from is not None:
            statement = statement.where(attendance_records.c.attendance_date >= date_from)
        if date_to is not None:
            statement = statement.where(attendance_records.c.attendance_date <= date_to)
        return await self._all(statement.order_by(attendance_records.c.attendance_date.desc()))

    async def class_report(self, class_id: UUID, on: date) -> dict[str, int]:
        statement = (
            select(attendance_records.c.status, func.count().label("count"))
            .where(attendance_records.c.class_id == class_id)
            .where(attendance_records.c.attendance_date == on)
            .group_by(attendance_records.c.status)
        )
        rows = await self._all(statement)
        report = {status: 0 for status in ATTENDANCE_STATUSES}
        for row in rows:
            report[row["status"]] = int(row["count"])
        return report

    async def summary(self, student_id: UUID) -> AttendanceSummary:
        statement = select(
            func.coalesce(
                func.sum(case((attendance_records.c.status == "present", 1), else_=0)), 0
            ).label("present"),
            func.count().label("total"),
        ).where(attendance_records.c.student_id == student_id)
        row = await self._one(statement)
        if row is None:
            return AttendanceSummary(present=0, total=0)
        return AttendanceSummary(present=int(row["present"] or 0), total=int(row["total"] or 0))
