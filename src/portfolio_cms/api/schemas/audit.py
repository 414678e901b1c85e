"""Pydantic schemas for the audit log endpoint."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AuditEntryResponse(BaseModel):
    """One recorded admin action."""

    id: int
    user_id: int | None = None
    action: str = Field(description="Action tag, e.g. CREATE_REPORT")
    entity_type: str
    entity_id: int
    new_value: Any = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
