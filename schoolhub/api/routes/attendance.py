from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from schoolhub.core.auth import Principal, require_permission
from schoolhub.core.context import TenantContext
from schoolhub.core.permissions import Permission
from schoolhub.core.repositories.attendance import AttendanceMark, AttendanceRepository
from schoolhub.core.repositories.students import StudentRepository
from schoolhub.core.tenancy.resolver import require_tenant_context
from schoolhub.schemas.attendance import (
    AttendanceBatchRequest,
    AttendanceBatchResponse,
    AttendanceRecordResponse,
    AttendanceSummaryResponse,
    ClassAttendanceReportResponse,
)

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("", response_model=AttendanceBatchResponse)
async def mark_attendance(
    payload: AttendanceBatchRequest,
    principal: Principal = Depends(require_permission(Permission.ATTENDANCE_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> AttendanceBatchResponse:
    repository = AttendanceRepository(context.connection, context.require_schema())
    marks = [
        AttendanceMark(
            student_id=record.student_id,
            status=record.status,
            attendance_date=record.attendance_date,
            class_id=record.class_id,
            metadata=record.metadata,
        )
        for record in payload.records
    ]
    recorded = await repository.mark(marks, marked_by=principal.user_id)
    await context.connection.commit()
    return AttendanceBatchResponse(recorded=recorded)


@router.get("/students/{student_id}", response_model=list[AttendanceRecordResponse])
async def student_attendance(
    student_id: UUID,
    date_from: date | None = None,
    date_to: date | None = None,
    _: Principal = Depends(require_permission(Permission.ATTENDANCE_VIEW)),
    context: TenantContext = Depends(require_tenant_context),
) -> list[AttendanceRecordResponse]:
    repository = AttendanceRepository(context.connection, context.require_schema())
    rows = await repository.student_history(student_id, date_from=date_from, date_to=date_to)
    return [AttendanceRecordResponse.model_validate(row) for row in rows]


@router.get("/students/{student_id}/summary", response_model=AttendanceSummaryResponse)
async def student_attendance_summary(
    student_id: UUID,
    _: Principal = Depends(require_permission(Permission.ATTENDANCE_VIEW)),
    context: TenantContext = Depends(require_tenant_context),
) -> AttendanceSummaryResponse:
    repository = AttendanceRepository(context.connection, context.require_schema())
    summary = await repository.summary(student_id)
    return AttendanceSummaryResponse(
        present=summary.present,
        total=summary.total,
        percentage=summary.percentage,
    )


@router.get("/classes/{class_id}/report", response_model=ClassAttendanceReportResponse)
async def class_attendance_report(
    class_id: UUID,
    on: date,
    _: Principal = Depends(require_permission(Permission.ATTENDANCE_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> ClassAttendanceReportResponse:
    repository = AttendanceRepository(context.connection, context.require_schema())
    counts = await repository.class_report(class_id, on)
    return ClassAttendanceReportResponse(class_id=class_id, attendance_date=on, counts=counts)


@router.get("/me", response_model=list[AttendanceRecordResponse])
async def my_attendance(
    date_from: date | None = None,
    date_to: date | None = None,
    principal: Principal = Depends(require_permission(Permission.ATTENDANCE_VIEW)),
    context: TenantContext = Depends(require_tenant_context),
) -> list[AttendanceRecordResponse]:
    schema_name = context.require_schema()
    student = await StudentRepository(context.connection, schema_name).get_by_user_id(principal.user_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No student record for this user",
        )
    repository = AttendanceRepository(context.connection, schema_name)
    rows = await repository.student_history(student["id"], date_from=date_from, date_to=date_to)
    return [AttendanceRecordResponse.model_validate(row) for row in rows]
