"""Tables created inside every tenant schema.

They are declared against a placeholder schema and bound to a concrete tenant
schema with ``schema_translate_map`` at execution time.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PGUUID

from schoolhub.core.tenancy.schema_names import TENANT_SCHEMA_PLACEHOLDER

tenant_metadata = MetaData(schema=TENANT_SCHEMA_PLACEHOLDER)


def _id_column() -> Column:
    return Column("id", PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4)


def _ref(table: str, ondelete: str) -> ForeignKey:
    return ForeignKey(f"{TENANT_SCHEMA_PLACEHOLDER}.{table}.id", ondelete=ondelete)


def _timestamps() -> list[Column]:
    return [
        Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
        Column(
            "updated_at",
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=func.now(),
        ),
    ]


schools = Table(
    "schools",
    tenant_metadata,
    _id_column(),
    Column("name", String(255), nullable=False),
    Column("address", JSON, nullable=False, default=dict),
    *_timestamps(),
)

branding_settings = Table(
    "branding_settings",
    tenant_metadata,
    _id_column(),
    Column("logo_url", String(1024)),
    Column("primary_color", String(32)),
    Column("secondary_color", String(32)),
    Column("theme_flags", JSON, nullable=False, default=dict),
    Column("typography", JSON, nullable=False, default=dict),
    Column("navigation", JSON, nullable=False, default=dict),
    *_timestamps(),
)

academic_terms = Table(
    "academic_terms",
    tenant_metadata,
    _id_column(),
    Column("name", String(120), nullable=False, unique=True),
    Column("starts_on", Date, nullable=False),
    Column("ends_on", Date, nullable=False),
    Column("metadata", JSON, nullable=False, default=dict),
    *_timestamps(),
)

classes = Table(
    "classes",
    tenant_metadata,
    _id_column(),
    Column("name", String(120), nullable=False, unique=True),
    Column("description", Text),
    Column("metadata", JSON, nullable=False, default=dict),
    *_timestamps(),
)

students = Table(
    "students",
    tenant_metadata,
    _id_column(),
    Column("user_id", PGUUID(as_uuid=True), index=True),
    Column("first_name", String(120), nullable=False),
    Column("last_name", String(120), nullable=False),
    Column("admission_number", String(64), unique=True),
    Column("class_id", PGUUID(as_uuid=True), _ref("classes", "SET NULL")),
    Column("date_of_birth", Date),
    *_timestamps(),
)

teachers = Table(
    "teachers",
    tenant_metadata,
    _id_column(),
    Column("user_id", PGUUID(as_uuid=True), index=True),
    Column("first_name", String(120), nullable=False),
    Column("last_name", String(120), nullable=False),
    Column("subjects", JSON, nullable=False, default=list),
    *_timestamps(),
)

attendance_records = Table(
    "attendance_records",
    tenant_metadata,
    _id_column(),
    Column("student_id", PGUUID(as_uuid=True), _ref("students", "CASCADE"), nullable=False),
    Column("class_id", PGUUID(as_uuid=True), _ref("classes", "SET NULL")),
    Column("status", String(16), nullable=False),
    Column("marked_by", PGUUID(as_uuid=True), nullable=False),
    Column("attendance_date", Date, nullable=False),
    Column("metadata", JSON, nullable=False, default=dict),
    Column("recorded_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    UniqueConstraint(
        "student_id",
        "class_id",
        "attendance_date",
        name="uq_attendance_student_class_date",
        postgresql_nulls_not_distinct=True,
    ),
)
Index("ix_attendance_records_class_date", attendance_records.c.class_id, attendance_records.c.attendance_date)

exams = Table(
    "exams",
    tenant_metadata,
    _id_column(),
    Column("term_id", PGUUID(as_uuid=True), _ref("academic_terms", "CASCADE")),
    Column("class_id", PGUUID(as_uuid=True), _ref("classes", "SET NULL")),
    Column("name", String(120), nullable=False),
    Column("max_score", Numeric(6, 2), nullable=False),
    Column("held_on", Date),
    *_timestamps(),
)

grades = Table(
    "grades",
    tenant_metadata,
    _id_column(),
    Column("exam_id", PGUUID(as_uuid=True), _ref("exams", "CASCADE"), nullable=False),
    Column("student_id", PGUUID(as_uuid=True), _ref("students", "CASCADE"), nullable=False),
    Column("score", Numeric(6, 2), nullable=False),
    Column("remarks", Text),
    *_timestamps(),
    UniqueConstraint("exam_id", "student_id", name="uq_grades_exam_student"),
)

invoices = Table(
    "invoices",
    tenant_metadata,
    _id_column(),
    Column("student_id", PGUUID(as_uuid=True), _ref("students", "CASCADE"), nullable=False),
    Column("term_id", PGUUID(as_uuid=True), _ref("academic_terms", "SET NULL")),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False, default="USD"),
    Column("status", String(16), nullable=False, default="pending"),
    Column("due_on", Date),
    Column("items", JSON, nullable=False, default=list),
    *_timestamps(),
)

TENANT_TABLE_NAMES = tuple(table.name for table in tenant_metadata.sorted_tables)
