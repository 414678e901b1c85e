"""Pydantic schemas for report API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from portfolio_cms.api.schemas.common import FailedItem, PaginationMeta

ReportType = Literal["text", "file", "link"]


class ReportResponse(BaseModel):
    """Response schema for a single report."""

    id: int
    title: str
    description: str
    type: ReportType
    content: str
    url: str | None = None
    platform: str | None = None
    file: dict[str, Any] | None = None
    visible: bool
    created_at: datetime
    created_by: int | None = None


class ReportCreateRequest(BaseModel):
    """Request schema for creating a text or link report."""

    title: str = Field(..., min_length=1, max_length=200, description="Report title")
    description: str = Field("", description="Short description")
    type: ReportType = Field("text", description="Report variant")
    content: str = Field("", description="Inline body for text reports")
    url: str | None = Field(None, description="Target URL for link reports")
    platform: str | None = Field(None, description="Platform tag for link reports")
    visible: bool = True


class ReportUpdateRequest(BaseModel):
    """Request schema for updating a report. Only provided fields change."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    type: ReportType | None = None
    content: str | None = None
    url: str | None = None
    platform: str | None = None
    visible: bool | None = None


class ReportListResponse(BaseModel):
    reports: list[ReportResponse]
    pagination: PaginationMeta


class ReportUploadResponse(BaseModel):
    reports: list[ReportResponse]


class ReportUploadFailure(BaseModel):
    """Error body returned when a report upload batch fails."""

    detail: str
    failed: list[FailedItem] = Field(default_factory=list)


class ReportStatistics(BaseModel):
    """Counts over a parent's reports."""

    total: int
    visible: int
    hidden: int
    by_type: dict[str, int]
