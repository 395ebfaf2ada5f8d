from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from schoolhub.core.auth import Principal, require_permission
from schoolhub.core.context import TenantContext
from schoolhub.core.permissions import Permission
from schoolhub.core.repositories.students import StudentRepository
from schoolhub.core.tenancy.resolver import require_tenant_context
from schoolhub.schemas.student import StudentCreateRequest, StudentResponse, StudentUpdateRequest

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=list[StudentResponse])
async def list_students(
    class_id: UUID | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: Principal = Depends(require_permission(Permission.ATTENDANCE_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> list[StudentResponse]:
    repository = StudentRepository(context.connection, context.require_schema())
    rows = await repository.list_students(class_id=class_id, limit=limit, offset=offset)
    return [StudentResponse.model_validate(row) for row in rows]


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    _: Principal = Depends(require_permission(Permission.ATTENDANCE_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> StudentResponse:
    repository = StudentRepository(context.connection, context.require_schema())
    student = await repository.get(student_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    return StudentResponse.model_validate(student)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentCreateRequest,
    _: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> StudentResponse:
    repository = StudentRepository(context.connection, context.require_schema())
    student = await repository.create(**payload.model_dump())
    await context.connection.commit()
    return StudentResponse.model_validate(student)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    payload: StudentUpdateRequest,
    _: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> StudentResponse:
    repository = StudentRepository(context.connection, context.require_schema())
    student = await repository.update(student_id, **payload.model_dump(exclude_unset=True))
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    await context.connection.commit()
    return StudentResponse.model_validate(student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: UUID,
    _: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> Response:
    repository = StudentRepository(context.connection, context.require_schema())
    if not await repository.delete(student_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
    await context.connection.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
