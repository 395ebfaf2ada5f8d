from schoolhub.models.base import Base, SharedBase
from schoolhub.models.tenant import Tenant, TenantStatus
from schoolhub.models.tenant_tables import tenant_metadata
from schoolhub.models.user import TenantUser

__all__ = [
    "Base",
    "SharedBase",
    "Tenant",
    "TenantStatus",
    "TenantUser",
    "tenant_metadata",
]
