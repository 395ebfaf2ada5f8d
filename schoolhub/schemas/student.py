from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class StudentCreateRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    admission_number: str | None = Field(default=None, max_length=64)
    class_id: UUID | None = None
    user_id: UUID | None = None
    date_of_birth: date | None = None


class StudentResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    admission_number: str | None = None
    class_id: UUID | None = None
    user_id: UUID | None = None
    date_of_birth: date | None = None


class StudentUpdateRequest(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=120)
    last_name: str | None = Field(default=None, min_length=1, max_length=120)
    admission_number: str | None = Field(default=None, max_length=64)
    class_id: UUID | None = None
    user_id: UUID | None = None
    date_of_birth: date | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _names_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("must not be null")
        return value
