"""Shared Pydantic schemas for API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

# Default pagination values
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class PaginationMeta(BaseModel):
    """Page-based pagination metadata for list responses."""

    total: int = Field(description="Total number of items after filtering")
    page: int = Field(description="1-based page number")
    limit: int = Field(description="Maximum number of items per page")
    pages: int = Field(description="Number of pages available")


class FailedItem(BaseModel):
    """A file that could not be uploaded as part of a batch."""

    file_name: str
    error: str
