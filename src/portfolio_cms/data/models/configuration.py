"""ORM model for the singleton site configuration."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base


class Configuration(Base):
    """Site-wide presentation settings edited from the admin panel.

    Each section is stored as a JSON object (``navigation`` as a list) so new
    keys can be added without a migration. Like ``About``, a single row is used
    and ``services.configuration`` creates it from defaults on first read.

    Attributes:
        id: Auto-incrementing primary key.
        site_info: Name, title, bios and tagline for the site header.
        branding: Logo and icon URLs.
        contact_info: Public contact details.
        social_links: Mapping of platform name to profile URL.
        stats: Headline counters shown on the landing page.
        seo: Page title, description, keywords and preview image.
        theme: Color palette as hex strings.
        profile_photo: Photo URL and alt text.
        settings: Section toggles and maintenance mode.
        navigation: Ordered menu entries with name, href and visible.
        footer: Footer brand text and admin link toggle.
        updated_at: UTC timestamp when the record was last updated.
    """

    __tablename__ = "configuration"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    branding: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    contact_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    social_links: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    stats: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    seo: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    theme: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    profile_photo: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    navigation: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    footer: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
