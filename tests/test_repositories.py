from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from schoolhub.core.repositories import (
    AcademicTermRepository,
    AttendanceMark,
    AttendanceRepository,
    AttendanceSummary,
    BrandingRepository,
    SchoolRepository,
    StudentRepository,
)
from schoolhub.core.tenancy.errors import ValidationError


class _Mappings:
    def __init__(self, rows: list[dict]) -> None:
        self.rows = rows

    def first(self) -> dict | None:
        return self.rows[0] if self.rows else None

    def all(self) -> list[dict]:
        return self.rows


class _Result:
    def __init__(self, rows: list[dict] | None = None, rowcount: int = 0) -> None:
        self.rows = rows or []
        self.rowcount = rowcount

    def mappings(self) -> _Mappings:
        return _Mappings(self.rows)


class _Connection:
    """Records the statements and the schema translation used for each one."""

    def __init__(self, *results: _Result) -> None:
        self.results = list(results)
        self.statements: list = []
        self.options: list[dict] = []

    async def execution_options(self, **options):  # noqa: ANN003
        self.options.append(options)
        return self

    async def execute(self, statement):  # noqa: ANN001
        self.statements.append(statement)
        return self.results.pop(0) if self.results else _Result()


def _sql(statement) -> str:  # noqa: ANN001
    return str(statement.compile(dialect=postgresql.dialect()))


def test_repository_rejects_invalid_schema() -> None:
    with pytest.raises(ValidationError):
        StudentRepository(_Connection(), "acme; drop schema shared")
    with pytest.raises(ValidationError):
        StudentRepository(_Connection(), "public")


@pytest.mark.asyncio
async def test_statements_are_bound_to_tenant_schema() -> None:
    connection = _Connection(_Result([{"id": uuid4(), "first_name": "Ada"}]))
    repository = StudentRepository(connection, "acme_school")

    rows = await repository.list_students(limit=10)

    assert rows[0]["first_name"] == "Ada"
    assert connection.options == [{"schema_translate_map": {"tenant": "acme_school"}}]
    assert "tenant.students" in _sql(connection.statements[0])
    assert repository.qualified_name == "acme_school.students"


@pytest.mark.asyncio
async def test_schema_is_revalidated_before_binding() -> None:
    connection = _Connection()
    repository = StudentRepository(connection, "acme_school")
    repository.schema_name = "Acme-School"

    with pytest.raises(ValidationError):
        await repository.get(uuid4())
    assert connection.statements == []


@pytest.mark.asyncio
async def test_update_ignores_id_and_falls_back_to_get() -> None:
    row = {"id": uuid4(), "name": "Acme"}
    connection = _Connection(_Result([row]))
    repository = SchoolRepository(connection, "acme_school")

    assert await repository.update(row["id"], id=uuid4()) == row
    assert _sql(connection.statements[0]).startswith("SELECT")


@pytest.mark.asyncio
async def test_delete_reports_rowcount() -> None:
    repository = StudentRepository(_Connection(_Result(rowcount=1), _Result(rowcount=0)), "acme_school")

    assert await repository.delete(uuid4()) is True
    assert await repository.delete(uuid4()) is False


@pytest.mark.asyncio
async def test_attendance_mark_upserts_each_record() -> None:
    connection = _Connection()
    repository = AttendanceRepository(connection, "acme_school")
    marks = [
        AttendanceMark(student_id=uuid4(), status="present", attendance_date=date(2026, 10, 19)),
        AttendanceMark(student_id=uuid4(), status="late", attendance_date=date(2026, 10, 18)),
    ]

    assert await repository.mark(marks, marked_by=uuid4()) == 2

    assert len(connection.statements) == 2
    sql = _sql(connection.statements[0])
    assert "INSERT INTO tenant.attendance_records" in sql
    assert "ON CONFLICT ON CONSTRAINT uq_attendance_student_class_date DO UPDATE" in sql


@pytest.mark.asyncio
async def test_attendance_mark_rejects_unknown_status() -> None:
    connection = _Connection()
    repository = AttendanceRepository(connection, "acme_school")
    marks = [
        AttendanceMark(student_id=uuid4(), status="present", attendance_date=date(2026, 10, 19)),
        AttendanceMark(student_id=uuid4(), status="excused", attendance_date=date(2026, 10, 19)),
    ]

    with pytest.raises(ValueError, match="excused"):
        await repository.mark(marks, marked_by=uuid4())
    assert connection.statements == []


@pytest.mark.asyncio
async def test_class_report_fills_missing_statuses() -> None:
    connection = _Connection(_Result([{"status": "present", "count": 18}, {"status": "late", "count": 2}]))
    repository = AttendanceRepository(connection, "acme_school")

    report = await repository.class_report(uuid4(), date(2026, 10, 19))

    assert report == {"present": 18, "absent": 0, "late": 2}


@pytest.mark.asyncio
async def test_summary() -> None:
    repository = AttendanceRepository(_Connection(_Result([{"present": 3, "total": 4}])), "acme_school")

    summary = await repository.summary(uuid4())

    assert summary == AttendanceSummary(present=3, total=4)
    assert summary.percentage == 75.0
    assert AttendanceSummary(present=0, total=0).percentage == 0.0


@pytest.mark.asyncio
async def test_save_term_upserts_by_name() -> None:
    term = {"id": uuid4(), "name": "Autumn", "starts_on": date(2026, 9, 1), "ends_on": date(2026, 12, 18)}
    connection = _Connection(_Result([term]))
    repository = AcademicTermRepository(connection, "acme_school")

    saved = await repository.save_term(name="Autumn", starts_on=term["starts_on"], ends_on=term["ends_on"])

    assert saved == term
    sql = _sql(connection.statements[0])
    assert "ON CONFLICT (name) DO UPDATE" in sql
    assert "RETURNING" in sql


@pytest.mark.asyncio
async def test_branding_upsert_keeps_stored_values() -> None:
    existing = {
        "id": uuid4(),
        "logo_url": "https://cdn.example.com/logo.png",
        "primary_color": "#112233",
        "secondary_color": "#445566",
        "theme_flags": {"dark": True},
        "typography": {},
        "navigation": {},
    }
    updated = {**existing, "primary_color": "#abcdef"}
    connection = _Connection(_Result([existing]), _Result([updated]))
    repository = BrandingRepository(connection, "acme_school")

    result = await repository.upsert_branding({"primary_color": "#abcdef", "logo_url": None})

    assert result == updated
    params = connection.statements[1].compile(dialect=postgresql.dialect()).params
    assert params["logo_url"] == existing["logo_url"]
    assert params["primary_color"] == "#abcdef"
    assert params["theme_flags"] == {"dark": True}


@pytest.mark.asyncio
async def test_branding_upsert_creates_first_row() -> None:
    created = {"id": uuid4(), "primary_color": "#000000"}
    connection = _Connection(_Result([]), _Result([created]))
    repository = BrandingRepository(connection, "acme_school")

    assert await repository.upsert_branding({"primary_color": "#000000"}) == created
    assert "INSERT INTO tenant.branding_settings" in _sql(connection.statements[1])


@pytest.mark.asyncio
async def test_student_lookup_by_user_id() -> None:
    user_id = uuid4()
    connection = _Connection(_Result([{"id": uuid4(), "user_id": user_id}]))
    repository = StudentRepository(connection, "acme_school")

    student = await repository.get_by_user_id(user_id)

    assert student["user_id"] == user_id
    assert "WHERE tenant.students.user_id = " in _sql(connection.statements[0])
