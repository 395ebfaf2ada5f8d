from __future__ import annotations

from fastapi import APIRouter, Depends, status

from schoolhub.core.auth import Principal, require_permission
from schoolhub.core.context import TenantContext
from schoolhub.core.permissions import Permission
from schoolhub.core.repositories.branding import BrandingRepository
from schoolhub.core.repositories.terms import AcademicTermRepository, ClassRepository
from schoolhub.core.tenancy.resolver import require_tenant_context
from schoolhub.schemas.branding import BrandingResponse, BrandingUpdateRequest
from schoolhub.schemas.configuration import (
    AcademicTermRequest,
    AcademicTermResponse,
    ClassRequest,
    ClassResponse,
)

router = APIRouter(prefix="/configuration", tags=["configuration"])


@router.get("/branding", response_model=BrandingResponse)
async def get_branding(
    _: Principal = Depends(require_permission(Permission.SETTINGS_BRANDING)),
    context: TenantContext = Depends(require_tenant_context),
) -> BrandingResponse:
    repository = BrandingRepository(context.connection, context.require_schema())
    branding = await repository.get_branding()
    if branding is None:
        return BrandingResponse()
    return BrandingResponse.model_validate(branding)


@router.put("/branding", response_model=BrandingResponse)
async def update_branding(
    payload: BrandingUpdateRequest,
    _: Principal = Depends(require_permission(Permission.SETTINGS_BRANDING)),
    context: TenantContext = Depends(require_tenant_context),
) -> BrandingResponse:
    repository = BrandingRepository(context.connection, context.require_schema())
    branding = await repository.upsert_branding(payload.model_dump(exclude_none=True))
    await context.connection.commit()
    return BrandingResponse.model_validate(branding)


@router.get("/terms", response_model=list[AcademicTermResponse])
async def list_terms(
    _: Principal = Depends(require_permission(Permission.DASHBOARD_VIEW)),
    context: TenantContext = Depends(require_tenant_context),
) -> list[AcademicTermResponse]:
    repository = AcademicTermRepository(context.connection, context.require_schema())
    return [AcademicTermResponse.model_validate(row) for row in await repository.list_terms()]


@router.post("/terms", response_model=AcademicTermResponse, status_code=status.HTTP_201_CREATED)
async def save_term(
    payload: AcademicTermRequest,
    _: Principal = Depends(require_permission(Permission.SETTINGS_TERMS)),
    context: TenantContext = Depends(require_tenant_context),
) -> AcademicTermResponse:
    repository = AcademicTermRepository(context.connection, context.require_schema())
    term = await repository.save_term(
        name=payload.name,
        starts_on=payload.starts_on,
        ends_on=payload.ends_on,
        metadata=payload.metadata,
    )
    await context.connection.commit()
    return AcademicTermResponse.model_validate(term)


@router.get("/classes", response_model=list[ClassResponse])
async def list_classes(
    _: Principal = Depends(require_permission(Permission.DASHBOARD_VIEW)),
    context: TenantContext = Depends(require_tenant_context),
) -> list[ClassResponse]:
    repository = ClassRepository(context.connection, context.require_schema())
    return [ClassResponse.model_validate(row) for row in await repository.list_classes()]


@router.post("/classes", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def save_class(
    payload: ClassRequest,
    _: Principal = Depends(require_permission(Permission.SETTINGS_TERMS)),
    context: TenantContext = Depends(require_tenant_context),
) -> ClassResponse:
    repository = ClassRepository(context.connection, context.require_schema())
    saved = await repository.save_class(
        name=payload.name,
        description=payload.description,
        metadata=payload.metadata,
    )
    await context.connection.commit()
    return ClassResponse.model_validate(saved)
