"""ORM model for skills listed in the skills section."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from portfolio_cms.data.db import Base


class Skill(Base):
    """A single skill with a 0-100 proficiency score."""

    __tablename__ = "skills"
    __table_args__ = (
        CheckConstraint("proficiency >= 0 AND proficiency <= 100", name="ck_skill_proficiency"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="other")
    proficiency: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    @validates("proficiency")
    def validate_proficiency(self, key: str, value: int) -> int:
        """Validate proficiency is within 0-100."""
        if value < 0 or value > 100:
            raise ValueError("Proficiency must be between 0 and 100")
        return value
