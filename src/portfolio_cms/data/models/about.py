"""ORM model for the singleton "about" section of the portfolio."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base


class About(Base):
    """Owner profile shown in the hero and about sections.

    Only one row is ever used; ``services.content`` creates it on first read.

    Attributes:
        id: Auto-incrementing primary key.
        name: Display name of the portfolio owner.
        title: Headline shown under the name.
        bio: Long-form about text.
        email: Public contact address.
        location: Free-form location string.
        avatar_url: Hosted profile picture.
        resume_url: Hosted resume document.
        social_links: Mapping of platform name to profile URL.
        visible: Whether the section is rendered publicly.
        updated_at: UTC timestamp when the record was last updated.
    """

    __tablename__ = "about"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True)
    resume_url: Mapped[str | None] = mapped_column(String, nullable=True)
    social_links: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
