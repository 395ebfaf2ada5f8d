from __future__ import annotations

from typing import Any

from schoolhub.core.repositories.base import Row, TenantTableRepository
from schoolhub.models.tenant_tables import branding_settings

BRANDING_FIELDS = (
    "logo_url",
    "primary_color",
    "secondary_color",
    "theme_flags",
    "typography",
    "navigation",
)
_JSON_FIELDS = {"theme_flags", "typography", "navigation"}


class BrandingRepository(TenantTableRepository):
    table = branding_settings

    async def get_branding(self) -> Row | None:
        return await self._one(
            self._select().order_by(branding_settings.c.updated_at.desc()).limit(1)
        )

    async def upsert_branding(self, changes: dict[str, Any]) -> Row:
        """Apply ``changes``; fields left out (or ``None``) keep their stored value."""
        existing = await self.get_branding()
        values: dict[str, Any] = {}
        for field in BRANDING_FIELDS:
            value = changes.get(field)
            if value is None and existing is not None:
                value = existing[field]
            if value is None and field in _JSON_FIELDS:
                value = {}
            values[field] = value

        if existing is None:
            return await self.create(**values)
        updated = await self.update(existing["id"], **values)
        return updated or existing
