from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncConnection

from schoolhub.core.auth import Principal
from schoolhub.core.tenancy.errors import TenantContextMissingError


class ResolutionState(str, enum.Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TenantRecord:
    id: UUID
    name: str
    schema_name: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, tenant: object) -> TenantRecord:
        return cls(
            id=tenant.id,
            name=tenant.name,
            schema_name=tenant.schema_name,
            status=tenant.status,
            created_at=tenant.created_at,
            updated_at=getattr(tenant, "updated_at", None),
        )


@dataclass(slots=True, frozen=True)
class TenantContext:
    """Tenant binding for a single request.

    ``tenant`` and ``schema_name`` are ``None`` only when the route accepted an
    optional context and a superadmin sent no tenant hint.
    """

    principal: Principal
    tenant: TenantRecord | None
    schema_name: str | None
    connection: AsyncConnection

    @property
    def has_tenant(self) -> bool:
        return self.tenant is not None

    def require_schema(self) -> str:
        if self.schema_name is None:
            raise TenantContextMissingError("A tenant must be selected for this operation")
        return self.schema_name
