from __future__ import annotations

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from schoolhub.models import TenantUser


def _ddl(element) -> str:  # noqa: ANN001
    return str(element.compile(dialect=postgresql.dialect()))


def test_unbound_user_email_is_unique() -> None:
    table = TenantUser.__table__
    index = next(index for index in table.indexes if index.name == "uq_users_unbound_email")

    sql = _ddl(CreateIndex(index))

    assert "CREATE UNIQUE INDEX uq_users_unbound_email ON shared.users (email) WHERE tenant_id IS NULL" in sql


def test_users_table_lives_in_shared_schema() -> None:
    sql = _ddl(CreateTable(TenantUser.__table__))

    assert "CREATE TABLE shared.users" in sql
    assert "CONSTRAINT uq_users_tenant_email UNIQUE (tenant_id, email)" in sql
    assert "REFERENCES shared.tenants (id)" in sql
