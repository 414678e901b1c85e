"""Pydantic schemas for content file endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from portfolio_cms.api.schemas.common import FailedItem
from portfolio_cms.api.schemas.content import ContentFileResponse


class FileListResponse(BaseModel):
    files: list[ContentFileResponse]


class FileUploadResponse(BaseModel):
    """Files attached by an upload, plus any files that failed."""

    files: list[ContentFileResponse]
    failed: list[FailedItem] = Field(default_factory=list)
    success: bool
