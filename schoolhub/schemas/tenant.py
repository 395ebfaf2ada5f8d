from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TenantCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    schema_name: str | None = Field(default=None, max_length=63)


class TenantRenameRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TenantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    schema_name: str
    status: str
    created_at: datetime


class AdminOverviewResponse(BaseModel):
    total_tenants: int | None = None
    tenant: TenantResponse | None = None
    tenant_users: int | None = None
