from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from schoolhub.core.auth import Principal
from schoolhub.core.context import ResolutionState
from schoolhub.core.permissions import Role
from schoolhub.core.tenancy import resolver as resolver_module
from schoolhub.core.tenancy.errors import (
    TenantContextMissingError,
    TenantNotFoundError,
    TenantSuspendedError,
    ValidationError,
)
from schoolhub.core.tenancy.resolver import TenantResolver, bind_tenant_context

from conftest import FakeCatalog, FakeDatabase, FakeRegistry


@pytest.fixture
def resolver(fake_database: FakeDatabase, monkeypatch: pytest.MonkeyPatch) -> TenantResolver:
    monkeypatch.setattr(resolver_module, "TenantRegistry", FakeRegistry)
    return TenantResolver(fake_database)


def _principal(role: Role, tenant_id=None) -> Principal:  # noqa: ANN001
    return Principal(user_id=uuid4(), role=role, tenant_id=tenant_id, email="user@example.com")


def _connection(catalog: FakeCatalog) -> Mock:
    connection = Mock()
    connection.catalog = catalog
    connection.tx = None
    connection.rollback = AsyncMock()
    return connection


@pytest.mark.asyncio
async def test_bound_principal_ignores_tenant_hint(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    t1 = catalog.add_tenant("School One", "school_one")
    t2 = catalog.add_tenant("School Two", "school_two")
    principal = _principal(Role.TEACHER, t1.id)
    scope = SimpleNamespace()

    context = await resolver.resolve(_connection(catalog), principal, str(t2.id), scope=scope)

    assert context.tenant == t1
    assert context.schema_name == "school_one"
    assert context.principal is principal
    assert scope.tenant_resolution is ResolutionState.RESOLVED


@pytest.mark.asyncio
async def test_superadmin_uses_tenant_hint(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    catalog.add_tenant("School One", "school_one")
    t2 = catalog.add_tenant("School Two", "school_two")

    context = await resolver.resolve(_connection(catalog), _principal(Role.SUPERADMIN), f" {t2.id} ")

    assert context.tenant == t2
    assert context.schema_name == "school_two"


@pytest.mark.asyncio
async def test_superadmin_hint_by_schema_name(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    t2 = catalog.add_tenant("School Two", "school_two")

    context = await resolver.resolve(_connection(catalog), _principal(Role.SUPERADMIN), "school_two")

    assert context.tenant == t2


@pytest.mark.asyncio
async def test_superadmin_without_hint_requires_context(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    scope = SimpleNamespace()

    with pytest.raises(TenantContextMissingError) as exc:
        await resolver.resolve(_connection(catalog), _principal(Role.SUPERADMIN), None, scope=scope)

    assert exc.value.status_code == 400
    assert scope.tenant_resolution is ResolutionState.FAILED


@pytest.mark.asyncio
async def test_superadmin_without_hint_optional_mode(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    connection = _connection(catalog)

    context = await resolver.resolve(connection, _principal(Role.SUPERADMIN), "", required=False)

    assert context.tenant is None
    assert context.schema_name is None
    assert context.connection is connection
    assert context.has_tenant is False
    with pytest.raises(TenantContextMissingError):
        context.require_schema()


@pytest.mark.asyncio
async def test_unbound_ordinary_principal_is_forbidden(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    catalog.add_tenant("School One", "school_one")

    with pytest.raises(TenantContextMissingError) as exc:
        await resolver.resolve(_connection(catalog), _principal(Role.ADMIN), "school_one", required=False)

    assert exc.value.status_code == 403


@pytest.mark.asyncio
async def test_unknown_tenant(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    with pytest.raises(TenantNotFoundError) as exc:
        await resolver.resolve(_connection(catalog), _principal(Role.TEACHER, uuid4()))

    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_suspended_tenant(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    tenant = catalog.add_tenant("School One", "school_one", status="suspended")

    with pytest.raises(TenantSuspendedError) as exc:
        await resolver.resolve(_connection(catalog), _principal(Role.STUDENT, tenant.id))

    assert exc.value.status_code == 403


@pytest.mark.asyncio
async def test_stored_schema_name_is_revalidated(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    tenant = catalog.add_tenant("Broken", "Broken-Name")

    with pytest.raises(ValidationError):
        await resolver.resolve(_connection(catalog), _principal(Role.ADMIN, tenant.id))


@pytest.mark.asyncio
async def test_lookup_releases_registry_transaction(resolver: TenantResolver, catalog: FakeCatalog) -> None:
    tenant = catalog.add_tenant("School One", "school_one")
    connection = _connection(catalog)

    await resolver.lookup(connection, str(tenant.id))

    connection.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_bind_tenant_context_releases_connection_on_error(
    resolver: TenantResolver, fake_database: FakeDatabase, catalog: FakeCatalog
) -> None:
    tenant = catalog.add_tenant("School One", "school_one")
    request = SimpleNamespace(state=SimpleNamespace(), headers={})

    with pytest.raises(RuntimeError):
        async with bind_tenant_context(request, _principal(Role.ADMIN, tenant.id), resolver, required=True) as context:
            assert context.schema_name == "school_one"
            raise RuntimeError("handler failed")

    assert fake_database.acquired == 1
    assert fake_database.released == 1
    assert request.state.tenant_resolution is ResolutionState.RESOLVED


@pytest.mark.asyncio
async def test_bind_tenant_context_releases_connection_on_resolution_failure(
    resolver: TenantResolver, fake_database: FakeDatabase
) -> None:
    request = SimpleNamespace(state=SimpleNamespace(), headers={})

    with pytest.raises(TenantContextMissingError):
        async with bind_tenant_context(request, _principal(Role.SUPERADMIN), resolver, required=True):
            pass

    assert fake_database.acquired == fake_database.released == 1
    assert request.state.tenant_resolution is ResolutionState.FAILED


@pytest.mark.asyncio
async def test_bind_tenant_context_reads_configured_header(
    resolver: TenantResolver, catalog: FakeCatalog
) -> None:
    tenant = catalog.add_tenant("School One", "school_one")
    request = SimpleNamespace(state=SimpleNamespace(), headers={"X-Tenant-Id": str(tenant.id)})

    async with bind_tenant_context(request, _principal(Role.SUPERADMIN), resolver, required=True) as context:
        assert context.tenant == tenant
