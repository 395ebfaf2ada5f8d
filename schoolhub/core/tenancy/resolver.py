from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncConnection

from schoolhub.core.auth import Principal, require_principal
from schoolhub.core.config import settings
from schoolhub.core.context import ResolutionState, TenantContext, TenantRecord
from schoolhub.core.db import Database, get_database
from schoolhub.core.tenancy.errors import (
    TenancyError,
    TenantContextMissingError,
    TenantNotFoundError,
    TenantSuspendedError,
)
from schoolhub.core.tenancy.registry import TenantRegistry
from schoolhub.core.tenancy.schema_names import assert_valid_schema_name
from schoolhub.models.tenant import TenantStatus

logger = logging.getLogger(__name__)


def _mark(scope: object | None, value: ResolutionState) -> None:
    if scope is not None:
        scope.tenant_resolution = value


class TenantResolver:
    """Maps an authenticated principal (plus an optional tenant hint) to a tenant.

    Principals bound to a tenant always resolve to that tenant; the hint is
    only honoured for unbound superadmins.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    @staticmethod
    def _identifier_for(principal: Principal, tenant_hint: str | None, *, required: bool) -> str | None:
        if principal.tenant_id is not None:
            if tenant_hint:
                logger.debug("Ignoring tenant hint for tenant-bound principal user=%s", principal.user_id)
            return str(principal.tenant_id)

        if not principal.is_superadmin:
            raise TenantContextMissingError(
                "Principal is not bound to a tenant",
                status_code=status.HTTP_403_FORBIDDEN,
            )

        hint = (tenant_hint or "").strip()
        if hint:
            return hint
        if required:
            raise TenantContextMissingError(
                f"Select a tenant with the {settings.tenant_header_name} header",
            )
        return None

    async def lookup(self, connection: AsyncConnection, identifier: str) -> TenantRecord:
        async with self.database.session(connection) as session:
            tenant = await TenantRegistry(session).find_by_identifier(identifier)
        # Registry reads must not hold a transaction open for the handler.
        await connection.rollback()

        if tenant is None:
            raise TenantNotFoundError(identifier)
        if tenant.status != TenantStatus.ACTIVE.value:
            raise TenantSuspendedError(identifier)
        return tenant

    async def resolve(
        self,
        connection: AsyncConnection,
        principal: Principal,
        tenant_hint: str | None = None,
        *,
        required: bool = True,
        scope: object | None = None,
    ) -> TenantContext:
        """Resolve the tenant for one request.

        ``scope`` (usually ``request.state``) receives the resolution state as
        ``tenant_resolution``.
        """
        _mark(scope, ResolutionState.RESOLVING)
        try:
            identifier = self._identifier_for(principal, tenant_hint, required=required)
            if identifier is None:
                context = TenantContext(
                    principal=principal,
                    tenant=None,
                    schema_name=None,
                    connection=connection,
                )
            else:
                tenant = await self.lookup(connection, identifier)
                schema_name = assert_valid_schema_name(tenant.schema_name)
                context = TenantContext(
                    principal=principal,
                    tenant=tenant,
                    schema_name=schema_name,
                    connection=connection,
                )
        except TenancyError as exc:
            _mark(scope, ResolutionState.FAILED)
            logger.info(
                "Tenant resolution failed user=%s role=%s reason=%s",
                principal.user_id,
                principal.role.value,
                exc.detail,
            )
            raise

        _mark(scope, ResolutionState.RESOLVED)
        return context


def get_tenant_resolver(database: Database = Depends(get_database)) -> TenantResolver:
    return TenantResolver(database)


@asynccontextmanager
async def bind_tenant_context(
    request: Request,
    principal: Principal,
    resolver: TenantResolver,
    *,
    required: bool,
) -> AsyncIterator[TenantContext]:
    request.state.tenant_resolution = ResolutionState.UNRESOLVED
    tenant_hint = request.headers.get(settings.tenant_header_name)
    async with resolver.database.connect() as connection:
        yield await resolver.resolve(
            connection,
            principal,
            tenant_hint,
            required=required,
            scope=request.state,
        )


async def require_tenant_context(
    request: Request,
    principal: Principal = Depends(require_principal),
    resolver: TenantResolver = Depends(get_tenant_resolver),
) -> AsyncGenerator[TenantContext, None]:
    async with bind_tenant_context(request, principal, resolver, required=True) as context:
        yield context


async def optional_tenant_context(
    request: Request,
    principal: Principal = Depends(require_principal),
    resolver: TenantResolver = Depends(get_tenant_resolver),
) -> AsyncGenerator[TenantContext, None]:
    async with bind_tenant_context(request, principal, resolver, required=False) as context:
        yield context
