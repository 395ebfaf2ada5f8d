from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from schoolhub.core.auth import Principal, require_permission
from schoolhub.core.context import TenantContext
from schoolhub.core.permissions import Permission
from schoolhub.core.repositories.school import SchoolRepository
from schoolhub.core.tenancy.resolver import require_tenant_context
from schoolhub.schemas.school import SchoolResponse, SchoolUpsertRequest

router = APIRouter(prefix="/school", tags=["school"])


@router.get("", response_model=SchoolResponse)
async def get_school(
    _: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> SchoolResponse:
    repository = SchoolRepository(context.connection, context.require_schema())
    school = await repository.get_school()
    if school is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="School profile not found",
        )
    return SchoolResponse.model_validate(school)


@router.put("", response_model=SchoolResponse)
async def upsert_school(
    payload: SchoolUpsertRequest,
    _: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> SchoolResponse:
    repository = SchoolRepository(context.connection, context.require_schema())
    school = await repository.upsert_school(name=payload.name, address=payload.address)
    await context.connection.commit()
    return SchoolResponse.model_validate(school)
