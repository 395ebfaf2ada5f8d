from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.auth import Principal, require_permission
from schoolhub.core.context import TenantContext, TenantRecord
from schoolhub.core.permissions import Permission
from schoolhub.core.tenancy.provisioner import TenantProvisioner, get_tenant_provisioner
from schoolhub.core.tenancy.registry import TenantRegistry, get_tenant_registry
from schoolhub.core.tenancy.resolver import optional_tenant_context
from schoolhub.models.tenant import TenantStatus
from schoolhub.schemas.tenant import (
    AdminOverviewResponse,
    TenantCreateRequest,
    TenantRenameRequest,
    TenantResponse,
)

router = APIRouter(prefix="/admin", tags=["admin"])

require_tenant_admin = require_permission(Permission.TENANTS_MANAGE)


def _or_404(record: TenantRecord | None) -> TenantResponse:
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    return TenantResponse.model_validate(record)


@router.post("/tenants", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    payload: TenantCreateRequest,
    _: Principal = Depends(require_tenant_admin),
    provisioner: TenantProvisioner = Depends(get_tenant_provisioner),
) -> TenantResponse:
    record = await provisioner.create_tenant(payload.name, payload.schema_name)
    return TenantResponse.model_validate(record)


@router.get("/tenants", response_model=list[TenantResponse])
async def list_tenants(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: Principal = Depends(require_tenant_admin),
    registry: TenantRegistry = Depends(get_tenant_registry),
) -> list[TenantResponse]:
    records = await registry.list(limit=limit, offset=offset)
    return [TenantResponse.model_validate(record) for record in records]


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: UUID,
    _: Principal = Depends(require_tenant_admin),
    registry: TenantRegistry = Depends(get_tenant_registry),
) -> TenantResponse:
    return _or_404(await registry.get(tenant_id))


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
async def rename_tenant(
    tenant_id: UUID,
    payload: TenantRenameRequest,
    _: Principal = Depends(require_tenant_admin),
    provisioner: TenantProvisioner = Depends(get_tenant_provisioner),
) -> TenantResponse:
    return _or_404(await provisioner.rename_tenant(tenant_id, payload.name))


@router.post("/tenants/{tenant_id}/suspend", response_model=TenantResponse)
async def suspend_tenant(
    tenant_id: UUID,
    _: Principal = Depends(require_tenant_admin),
    provisioner: TenantProvisioner = Depends(get_tenant_provisioner),
) -> TenantResponse:
    return _or_404(await provisioner.set_tenant_status(tenant_id, TenantStatus.SUSPENDED))


@router.post("/tenants/{tenant_id}/activate", response_model=TenantResponse)
async def activate_tenant(
    tenant_id: UUID,
    _: Principal = Depends(require_tenant_admin),
    provisioner: TenantProvisioner = Depends(get_tenant_provisioner),
) -> TenantResponse:
    return _or_404(await provisioner.set_tenant_status(tenant_id, TenantStatus.ACTIVE))


@router.get("/overview", response_model=AdminOverviewResponse)
async def admin_overview(
    principal: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(optional_tenant_context),
) -> AdminOverviewResponse:
    overview = AdminOverviewResponse()
    async with AsyncSession(bind=context.connection) as session:
        registry = TenantRegistry(session)
        if principal.is_superadmin:
            overview.total_tenants = await registry.count()
        if context.tenant is not None:
            overview.tenant = TenantResponse.model_validate(context.tenant)
            overview.tenant_users = await registry.count_users(context.tenant.id)
    return overview
