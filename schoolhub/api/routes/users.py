from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.auth import Principal, require_permission
from schoolhub.core.context import TenantContext
from schoolhub.core.permissions import Permission, Role
from schoolhub.core.tenancy.registry import TenantRegistry
from schoolhub.core.tenancy.resolver import require_tenant_context
from schoolhub.schemas.user import TenantUserResponse, UserRoleUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[TenantUserResponse])
async def list_users(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> list[TenantUserResponse]:
    async with AsyncSession(bind=context.connection) as session:
        users = await TenantRegistry(session).list_users(context.tenant.id, limit=limit, offset=offset)
        return [TenantUserResponse.model_validate(user) for user in users]


@router.patch("/{user_id}/role", response_model=TenantUserResponse)
async def update_user_role(
    user_id: UUID,
    payload: UserRoleUpdateRequest,
    principal: Principal = Depends(require_permission(Permission.USERS_MANAGE)),
    context: TenantContext = Depends(require_tenant_context),
) -> TenantUserResponse:
    if payload.role is Role.SUPERADMIN and not principal.is_superadmin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only a superadmin can grant the superadmin role",
        )

    async with AsyncSession(bind=context.connection, expire_on_commit=False) as session:
        user = await TenantRegistry(session).update_user_role(context.tenant.id, user_id, payload.role)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found for tenant",
            )
        await session.commit()

    logger.info(
        "[audit] user_role_updated tenant=%s user=%s role=%s actor=%s",
        context.tenant.id,
        user_id,
        payload.role.value,
        principal.user_id,
    )
    return TenantUserResponse.model_validate(user)
