"""ORM model for the append-only audit trail of admin actions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_cms.data.db import Base


class AuditLog(Base):
    """One recorded admin action.

    Rows are only ever inserted; nothing in the application updates or
    deletes them.

    Attributes:
        user_id: ID of the acting user, if known.
        action: Action tag such as ``CREATE_REPORT``.
        entity_type: Logical content type the action targeted.
        entity_id: ID of the targeted record.
        new_value: JSON snapshot of the value written by the action.
        ip_address: Client address of the originating request, if known.
        user_agent: User-Agent header of the originating request, if known.
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    new_value: Mapped[Any] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
