"""ORM model for files attached to certificates and projects."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_cms.data.db import Base

if TYPE_CHECKING:
    from portfolio_cms.data.models.certificate import Certificate
    from portfolio_cms.data.models.project import Project


class ContentFile(Base):
    """A file stored in the media host and attached to one parent record.

    Attributes:
        public_id: Media store identifier used for deletion.
        resource_type: Media store resource type the file was uploaded as.
        category: ``image``, ``document``, ``archive``, ``video`` or ``other``.
        is_primary: The file used as the parent's cover/preview.
    """

    __tablename__ = "content_files"
    __table_args__ = (
        CheckConstraint(
            "(certificate_id IS NULL) != (project_id IS NULL)",
            name="ck_content_file_single_parent",
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
    url: Mapped[str] = mapped_column(String, nullable=False)
    public_id: Mapped[str] = mapped_column(String, nullable=False)
    original_name: Mapped[str] = mapped_column(String, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(128), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    resource_type: Mapped[str] = mapped_column(String(16), nullable=False, default="raw")
    category: Mapped[str] = mapped_column(String(16), nullable=False, default="other")
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    certificate: Mapped[Certificate | None] = relationship("Certificate", back_populates="files")
    project: Mapped[Project | None] = relationship("Project", back_populates="files")
