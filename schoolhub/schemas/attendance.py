from __future__ import annotations

from datetime import date
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

AttendanceStatus = Literal["present", "absent", "late"]


class AttendanceMarkRequest(BaseModel):
    student_id: UUID
    status: AttendanceStatus
    attendance_date: date
    class_id: UUID | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AttendanceBatchRequest(BaseModel):
    records: list[AttendanceMarkRequest] = Field(min_length=1, max_length=500)


class AttendanceBatchResponse(BaseModel):
    recorded: int


class AttendanceRecordResponse(BaseModel):
    id: UUID
    student_id: UUID
    class_id: UUID | None = None
    status: AttendanceStatus
    attendance_date: date
    metadata: dict[str, Any] = Field(default_factory=dict)


class AttendanceSummaryResponse(BaseModel):
    present: int
    total: int
    percentage: float


class ClassAttendanceReportResponse(BaseModel):
    class_id: UUID
    attendance_date: date
    counts: dict[str, int]
