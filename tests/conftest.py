from __future__ import annotations

import asyncio
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest
from sqlalchemy import create_mock_engine
from sqlalchemy.exc import IntegrityError, ProgrammingError

from schoolhub.core.context import TenantRecord

_CREATE_RE = re.compile(r'CREATE SCHEMA "(?P<name>\w+)"')
_DROP_RE = re.compile(r'DROP SCHEMA IF EXISTS "(?P<name>\w+)" CASCADE')
_CREATE_TABLE_RE = re.compile(r"CREATE TABLE (?P<schema>\w+)\.(?P<table>\w+)")


class _DuplicateSchema(Exception):
    sqlstate = "42P06"


@dataclass
class _Transaction:
    schemas: dict[str, set[str]] = field(default_factory=dict)
    tenants: dict[str, TenantRecord] = field(default_factory=dict)
    locks: list[str] = field(default_factory=list)


class FakeCatalog:
    """In-memory stand-in for the PostgreSQL catalog plus ``shared.tenants``.

    With ``transactional_ddl`` (the PostgreSQL behaviour) schemas created in a
    transaction only become visible on commit. A second ``CREATE SCHEMA`` of a
    name locked by an open transaction waits for it, like the real catalog.
    Table DDL is compiled for PostgreSQL and kept in ``ddl``; ``ddl_yields``
    suspends the creating task that many times before the tables appear.
    """

    def __init__(self, *, transactional_ddl: bool = True) -> None:
        self.transactional_ddl = transactional_ddl
        self.schemas: dict[str, set[str]] = {}
        self.tenants: dict[str, TenantRecord] = {}
        self.statements: list[str] = []
        self.ddl: list[str] = []
        self.ddl_yields = 0
        self._locks: dict[str, asyncio.Event] = {}

    def add_tenant(self, name: str, schema_name: str, status: str = "active") -> TenantRecord:
        record = TenantRecord(
            id=uuid4(),
            name=name,
            schema_name=schema_name,
            status=status,
            created_at=datetime.now(timezone.utc),
        )
        self.tenants[schema_name] = record
        self.schemas.setdefault(schema_name, set())
        return record


class FakeConnection:
    def __init__(self, catalog: FakeCatalog) -> None:
        self.catalog = catalog
        self.tx: _Transaction | None = None
        self.options: dict = {}

    async def execution_options(self, **options):  # noqa: ANN003
        self.options = {**self.options, **options}
        return self

    async def run_sync(self, fn, *args, **kwargs):  # noqa: ANN001, ANN002, ANN003
        for _ in range(self.catalog.ddl_yields):
            await asyncio.sleep(0)
        translate_map = self.options.get("schema_translate_map")

        def _executor(clause, *multiparams, **params):  # noqa: ANN001, ANN002, ANN003
            sql = str(
                clause.compile(
                    dialect=engine.dialect,
                    schema_translate_map=translate_map,
                    render_schema_translate=True,
                )
            )
            self.catalog.ddl.append(sql)
            created = _CREATE_TABLE_RE.search(sql)
            if created:
                self.pending_schema(created.group("schema")).add(created.group("table"))

        engine = create_mock_engine("postgresql://", _executor)
        return fn(engine, *args, **kwargs)

    @asynccontextmanager
    async def begin(self):
        self.tx = _Transaction()
        try:
            yield self
        except BaseException:
            self._finish(commit=False)
            raise
        self._finish(commit=True)

    def _finish(self, *, commit: bool) -> None:
        tx, self.tx = self.tx, None
        if tx is None:
            return
        if commit:
            self.catalog.schemas.update(tx.schemas)
            self.catalog.tenants.update(tx.tenants)
        for name in tx.locks:
            event = self.catalog._locks.pop(name, None)
            if event is not None:
                event.set()

    async def execute(self, clause):  # noqa: ANN001
        sql = str(clause)
        self.catalog.statements.append(sql)

        created = _CREATE_RE.fullmatch(sql)
        if created:
            name = created.group("name")
            while name in self.catalog._locks:
                await self.catalog._locks[name].wait()
            if name in self.catalog.schemas:
                raise ProgrammingError(sql, {}, _DuplicateSchema(f'schema "{name}" already exists'))
            if self.catalog.transactional_ddl and self.tx is not None:
                self.catalog._locks[name] = asyncio.Event()
                self.tx.locks.append(name)
                self.tx.schemas[name] = set()
            else:
                self.catalog.schemas[name] = set()
            return None

        dropped = _DROP_RE.fullmatch(sql)
        if dropped:
            self.catalog.schemas.pop(dropped.group("name"), None)
            return None

        raise AssertionError(f"Unexpected statement: {sql}")

    def pending_schema(self, name: str) -> set[str]:
        if self.tx is not None and name in self.tx.schemas:
            return self.tx.schemas[name]
        return self.catalog.schemas[name]

    async def rollback(self) -> None:
        return None

    async def commit(self) -> None:
        return None


class FakeRegistry:
    """Replaces ``TenantRegistry``; the "session" it receives is a FakeConnection."""

    def __init__(self, session: FakeConnection) -> None:
        self.connection = session
        self.catalog = session.catalog

    def _visible(self) -> dict[str, TenantRecord]:
        tenants = dict(self.catalog.tenants)
        if self.connection.tx is not None:
            tenants.update(self.connection.tx.tenants)
        return tenants

    async def schema_name_taken(self, schema_name: str) -> bool:
        return schema_name in self._visible()

    async def create(self, *, name: str, schema_name: str) -> TenantRecord:
        if schema_name in self.catalog.tenants:
            raise IntegrityError("INSERT INTO shared.tenants", {}, Exception("unique violation"))
        record = TenantRecord(
            id=uuid4(),
            name=name,
            schema_name=schema_name,
            status="active",
            created_at=datetime.now(timezone.utc),
        )
        if self.connection.tx is not None:
            self.connection.tx.tenants[schema_name] = record
        else:
            self.catalog.tenants[schema_name] = record
        return record

    async def find_by_identifier(self, hint: str | UUID) -> TenantRecord | None:
        for record in self.catalog.tenants.values():
            if str(record.id) == str(hint) or record.schema_name == hint:
                return record
        return None


class FakeDatabase:
    def __init__(self, catalog: FakeCatalog) -> None:
        self.catalog = catalog
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def connect(self):
        self.acquired += 1
        try:
            yield FakeConnection(self.catalog)
        finally:
            self.released += 1

    @asynccontextmanager
    async def _session(self, connection: FakeConnection):
        yield connection

    def session(self, connection: FakeConnection):
        return self._session(connection)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def fake_database(catalog: FakeCatalog) -> FakeDatabase:
    return FakeDatabase(catalog)
