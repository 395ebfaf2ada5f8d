from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection

from schoolhub.core.config import settings
from schoolhub.core.context import TenantRecord
from schoolhub.core.db import Database, get_database
from schoolhub.core.tenancy.errors import (
    DuplicateTenantError,
    ProvisioningError,
    TenancyError,
    ValidationError,
)
from schoolhub.core.tenancy.registry import TenantRegistry
from schoolhub.core.tenancy.schema_names import (
    TENANT_SCHEMA_PLACEHOLDER,
    assert_valid_schema_name,
    is_reserved_schema_name,
    slugify_schema_name,
    with_suffix,
)
from schoolhub.models.tenant import TenantStatus
from schoolhub.models.tenant_tables import tenant_metadata

logger = logging.getLogger(__name__)

DUPLICATE_SCHEMA_SQLSTATE = "42P06"
UNIQUE_VIOLATION_SQLSTATE = "23505"


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_duplicate_error(exc: BaseException) -> bool:
    if isinstance(exc, IntegrityError):
        return True
    if isinstance(exc, DBAPIError):
        return _sqlstate(exc) in {DUPLICATE_SCHEMA_SQLSTATE, UNIQUE_VIOLATION_SQLSTATE}
    return False


class TenantProvisioner:
    """Creates tenant schemas together with their registry rows.

    The name checks, ``CREATE SCHEMA``, the tenant tables and the registry
    insert all run in one transaction on one connection. PostgreSQL rolls the
    DDL back with everything else; if the schema still exists afterwards
    without a registry row it is dropped on a fresh connection before the
    error propagates.
    """

    def __init__(self, database: Database, *, max_suffix_attempts: int | None = None) -> None:
        self.database = database
        self.max_suffix_attempts = max_suffix_attempts or settings.max_schema_suffix_attempts

    async def create_tenant(self, name: str, schema_name: str | None = None) -> TenantRecord:
        display_name = (name or "").strip()
        if not display_name:
            raise ValidationError(name, "must not be empty", field="tenant name")

        if schema_name is not None:
            return await self._provision(display_name, assert_valid_schema_name(schema_name))

        try:
            return await self._provision(display_name, None)
        except DuplicateTenantError as exc:
            # Only a duplicate reported by the database is a lost race; an
            # exhausted suffix search has no cause and is final.
            if exc.__cause__ is None:
                raise
            logger.info("Derived tenant schema taken concurrently, deriving again name=%s", display_name)
        return await self._provision(display_name, None)

    async def _provision(self, display_name: str, schema_name: str | None) -> TenantRecord:
        schema_created = False
        async with self.database.connect() as connection:
            try:
                async with connection.begin():
                    async with self.database.session(connection) as session:
                        registry = TenantRegistry(session)
                        if schema_name is None:
                            schema_name = await self._derive_schema_name(registry, display_name)
                        elif await registry.schema_name_taken(schema_name):
                            raise DuplicateTenantError(schema_name)

                        await self._create_schema(connection, schema_name)
                        schema_created = True
                        await self._create_tables(connection, schema_name)
                        record = await registry.create(name=display_name, schema_name=schema_name)
            except TenancyError:
                raise
            except Exception as exc:
                label = schema_name or display_name
                if schema_created:
                    await self._drop_orphaned_schema(schema_name)
                if is_duplicate_error(exc):
                    logger.info("Tenant schema already exists schema=%s", label)
                    raise DuplicateTenantError(label) from exc
                logger.exception("Tenant provisioning failed schema=%s", label)
                raise ProvisioningError(label, exc) from exc

        logger.info("[audit] tenant_provisioned tenant=%s schema=%s", record.id, record.schema_name)
        return record

    async def _derive_schema_name(self, registry: TenantRegistry, display_name: str) -> str:
        suffix_room = len(str(self.max_suffix_attempts)) + 1
        base = slugify_schema_name(display_name, reserve=suffix_room)
        for attempt in range(1, self.max_suffix_attempts + 1):
            candidate = with_suffix(base, attempt)
            if is_reserved_schema_name(candidate):
                continue
            candidate = assert_valid_schema_name(candidate)
            if not await registry.schema_name_taken(candidate):
                return candidate
        raise DuplicateTenantError(base)

    async def _create_schema(self, connection: AsyncConnection, schema_name: str) -> None:
        schema = assert_valid_schema_name(schema_name)
        await connection.execute(text(f'CREATE SCHEMA "{schema}"'))

    async def _create_tables(self, connection: AsyncConnection, schema_name: str) -> None:
        schema = assert_valid_schema_name(schema_name)
        bound = await connection.execution_options(
            schema_translate_map={TENANT_SCHEMA_PLACEHOLDER: schema}
        )
        await bound.run_sync(tenant_metadata.create_all, checkfirst=False)

    async def _drop_orphaned_schema(self, schema_name: str) -> None:
        schema = assert_valid_schema_name(schema_name)
        try:
            async with self.database.connect() as connection:
                async with connection.begin():
                    async with self.database.session(connection) as session:
                        # A registered schema belongs to a tenant that won a concurrent race.
                        if await TenantRegistry(session).schema_name_taken(schema):
                            return
                    await connection.execute(text(f'DROP SCHEMA IF EXISTS "{schema}" CASCADE'))
        except Exception:
            logger.exception("Cleanup of tenant schema failed schema=%s", schema)
            return
        logger.warning("Removed partially provisioned tenant schema=%s", schema)

    async def set_tenant_status(self, tenant_id: UUID, status: TenantStatus) -> TenantRecord | None:
        async with self.database.connect() as connection:
            async with connection.begin():
                async with self.database.session(connection) as session:
                    record = await TenantRegistry(session).update_status(tenant_id, status)
        if record is not None:
            logger.info("[audit] tenant_status_changed tenant=%s status=%s", tenant_id, status.value)
        return record

    async def rename_tenant(self, tenant_id: UUID, name: str) -> TenantRecord | None:
        display_name = (name or "").strip()
        if not display_name:
            raise ValidationError(name, "must not be empty", field="tenant name")
        async with self.database.connect() as connection:
            async with connection.begin():
                async with self.database.session(connection) as session:
                    return await TenantRegistry(session).rename(tenant_id, display_name)


def get_tenant_provisioner(database: Database = Depends(get_database)) -> TenantProvisioner:
    return TenantProvisioner(database)
