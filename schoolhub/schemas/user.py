from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from schoolhub.core.permissions import Role


class UserRoleUpdateRequest(BaseModel):
    role: Role


class TenantUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: Role
    is_verified: bool
    created_at: datetime
