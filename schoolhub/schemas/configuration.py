from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class AcademicTermRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    starts_on: date
    ends_on: date
    metadata: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_range(self) -> AcademicTermRequest:
        if self.ends_on < self.starts_on:
            raise ValueError("ends_on must not be before starts_on")
        return self


class AcademicTermResponse(BaseModel):
    id: UUID
    name: str
    starts_on: date
    ends_on: date
    metadata: dict[str, Any] = Field(default_factory=dict)


class ClassRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    metadata: dict[str, Any] | None = None


class ClassResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
