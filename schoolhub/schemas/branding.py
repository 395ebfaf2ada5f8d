from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class BrandingUpdateRequest(BaseModel):
    logo_url: str | None = Field(default=None, max_length=1024)
    primary_color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    secondary_color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    theme_flags: dict[str, Any] | None = None
    typography: dict[str, Any] | None = None
    navigation: dict[str, Any] | None = None


class BrandingResponse(BaseModel):
    id: UUID | None = None
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    theme_flags: dict[str, Any] = Field(default_factory=dict)
    typography: dict[str, Any] = Field(default_factory=dict)
    navigation: dict[str, Any] = Field(default_factory=dict)
