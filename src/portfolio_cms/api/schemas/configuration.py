"""Pydantic schemas for the site configuration."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NavigationItem(BaseModel):
    """One entry of the site menu."""

    name: str = Field(min_length=1, max_length=60)
    href: str = Field(min_length=1)
    visible: bool = True


class ConfigurationResponse(BaseModel):
    """The full site configuration."""

    id: int
    site_info: dict[str, Any]
    branding: dict[str, Any]
    contact_info: dict[str, Any]
    social_links: dict[str, Any]
    stats: dict[str, Any]
    seo: dict[str, Any]
    theme: dict[str, Any]
    profile_photo: dict[str, Any]
    settings: dict[str, Any]
    navigation: list[NavigationItem]
    footer: dict[str, Any]
    updated_at: datetime


class ConfigurationUpdateRequest(BaseModel):
    """Sections to merge into the configuration; omitted sections are kept."""

    model_config = ConfigDict(extra="forbid")

    site_info: dict[str, Any] | None = None
    branding: dict[str, Any] | None = None
    contact_info: dict[str, Any] | None = None
    social_links: dict[str, Any] | None = None
    stats: dict[str, Any] | None = None
    seo: dict[str, Any] | None = None
    theme: dict[str, Any] | None = None
    profile_photo: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None
    navigation: list[NavigationItem] | None = Field(
        None, description="Replaces the whole menu when given"
    )
    footer: dict[str, Any] | None = None
