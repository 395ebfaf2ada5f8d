from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class SchoolUpsertRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: dict[str, Any] | None = None


class SchoolResponse(BaseModel):
    id: UUID
    name: str
    address: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
