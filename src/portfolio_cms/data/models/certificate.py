"""ORM model for professional certificates and achievements."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from portfolio_cms.data.db import Base

if TYPE_CHECKING:
    from portfolio_cms.data.models.content_file import ContentFile
    from portfolio_cms.data.models.report import Report

CERTIFICATE_TYPES = (
    "course",
    "workshop",
    "certification",
    "award",
    "degree",
    "diploma",
    "badge",
    "other",
)


class Certificate(Base):
    """A certificate with its reports and attached files.

    Attributes:
        id: Auto-incrementing primary key.
        title: Certificate name.
        issuer: Issuing organization.
        issue_date: Date the certificate was awarded.
        expiry_date: Optional expiry, must fall after ``issue_date``.
        credential_id: Issuer-side credential identifier.
        credential_url: Verification link.
        certificate_type: One of ``CERTIFICATE_TYPES``.
        description: Free-form description.
        featured: Pinned to the top of the public list.
        visible: Whether the certificate is rendered publicly.
    """

    __tablename__ = "certificates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    issuer: Mapped[str] = mapped_column(String(100), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    credential_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    credential_url: Mapped[str | None] = mapped_column(String, nullable=True)
    certificate_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default="certification"
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
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

    reports: Mapped[list[Report]] = relationship(
        "Report",
        back_populates="certificate",
        cascade="all, delete-orphan",
        order_by="Report.id",
    )
    files: Mapped[list[ContentFile]] = relationship(
        "ContentFile",
        back_populates="certificate",
        cascade="all, delete-orphan",
        order_by="ContentFile.id",
    )

    @validates("certificate_type")
    def validate_certificate_type(self, key: str, value: str) -> str:
        """Reject certificate types outside the known set."""
        if value not in CERTIFICATE_TYPES:
            raise ValueError(f"Invalid certificate type '{value}'")
        return value
