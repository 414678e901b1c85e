"""ORM model for reports attached to certificates and projects.

A report is a sub-entity of exactly one parent. It carries either inline
text, an external link, or a reference to a file held by the media store.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base

if TYPE_CHECKING:
    from portfolio_cms.data.models.certificate import Certificate
    from portfolio_cms.data.models.project import Project

REPORT_TYPES = ("text", "file", "link")


class Report(Base):
    """Persisted report belonging to a certificate or a project.

    Attributes:
        id: Auto-incrementing primary key, also the list order.
        certificate_id: Parent certificate (set when the parent is a certificate).
        project_id: Parent project (set when the parent is a project).
        title: Report title.
        description: Short description.
        type: ``text``, ``file`` or ``link``.
        content: Inline body for text reports.
        url: Target of link reports.
        platform: Platform tag of link reports (e.g. ``github``).
        file: Stored file metadata for file reports.
        visible: Whether the report is shown publicly.
        created_at: UTC creation timestamp.
        created_by: ID of the user who created the report.
    """

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "(certificate_id IS NULL) != (project_id IS NULL)",
            name="ck_report_single_parent",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    certificate_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("certificates.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    project_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="text")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[str | None] = mapped_column(String, nullable=True)
    platform: Mapped[str | None] = mapped_column(String(64), nullable=True)
    file: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)

    certificate: Mapped[Certificate | None] = relationship(
        "Certificate", back_populates="reports"
    )
    project: Mapped[Project | None] = relationship("Project", back_populates="reports")
