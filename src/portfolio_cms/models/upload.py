"""Data models for file upload and deletion results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(slots=True)
class IncomingFile:
    """A file received from a client, held in memory.

    Attributes:
        original_name: Filename as sent by the client.
        mime_type: Declared content type.
        data: Raw file bytes.
    """

    original_name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class UploadResult:
    """Normalized description of a file stored by the media store.

    Attributes:
        url: HTTPS delivery URL.
        public_id: Media store identifier, needed to delete the file.
        original_name: Filename as sent by the client.
        mime_type: Declared content type.
        size: Size in bytes.
        resource_type: ``image``, ``video`` or ``raw``.
        format: File format reported by the store, if any.
        width: Pixel width for images and videos.
        height: Pixel height for images and videos.
        uploaded_at: UTC timestamp of the upload.
    """

    url: str
    public_id: str
    original_name: str
    mime_type: str
    size: int
    resource_type: str = "raw"
    format: str | None = None
    width: int | None = None
    height: int | None = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_file_reference(self) -> dict[str, Any]:
        """Return the subset embedded into a file report."""
        return {
            "url": self.url,
            "public_id": self.public_id,
            "original_name": self.original_name,
            "mime_type": self.mime_type,
            "size": self.size,
            "resource_type": self.resource_type,
        }


@dataclass(slots=True)
class FailedUpload:
    file_name: str
    error: str


@dataclass(slots=True)
class BatchUploadResult:
    """Outcome of an all-settled batch upload."""

    successful: list[UploadResult] = field(default_factory=list)
    failed: list[FailedUpload] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def success(self) -> bool:
        return not self.failed

    def error_summary(self) -> str:
        """Describe every failed item in one message."""
        details = "; ".join(f"{item.file_name}: {item.error}" for item in self.failed)
        return f"{self.failure_count} of {self.total} file(s) failed to upload ({details})"

    def stored_references(self) -> list[tuple[str, str]]:
        """Return ``(public_id, resource_type)`` of every file that reached the store."""
        return [(upload.public_id, upload.resource_type) for upload in self.successful]


@dataclass(slots=True)
class FailedDelete:
    public_id: str
    error: str


@dataclass(slots=True)
class BatchDeleteResult:
    """Outcome of an all-settled batch deletion."""

    successful: list[str] = field(default_factory=list)
    failed: list[FailedDelete] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def failure_count(self) -> int:
        return len(self.failed)
