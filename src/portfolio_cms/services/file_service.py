"""File validation and upload against the remote media store.

FileService gate-keeps uploads by MIME type and size, hands accepted bytes to
a ``MediaStore`` and normalizes the store's response into ``UploadResult``.
Batch operations are all-settled: one failing file never aborts the others.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any
from uuid import uuid4

from portfolio_cms.models.errors import DeleteError, UploadError, ValidationError
from portfolio_cms.models.upload import (
    BatchDeleteResult,
    BatchUploadResult,
    FailedDelete,
    FailedUpload,
    IncomingFile,
    UploadResult,
)
from portfolio_cms.services.media_store import MediaStore
from portfolio_cms.utils.concurrency import settle_all

logger = logging.getLogger(__name__)

__all__ = [
    "ALLOWED_MIME_TYPES",
    "DEFAULT_MAX_FILE_SIZE",
    "MAX_FILES_PER_REQUEST",
    "FileService",
    "categorize_file",
    "get_max_upload_bytes",
    "resource_type_for",
]

IMAGE_MIME_TYPES = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"}
)
DOCUMENT_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
ARCHIVE_MIME_TYPES = frozenset(
    {"application/zip", "application/x-rar-compressed", "application/x-7z-compressed"}
)
VIDEO_MIME_TYPES = frozenset({"video/mp4", "video/webm", "video/quicktime"})
ALLOWED_MIME_TYPES = IMAGE_MIME_TYPES | DOCUMENT_MIME_TYPES | ARCHIVE_MIME_TYPES | VIDEO_MIME_TYPES

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024
MAX_FILES_PER_REQUEST = 10
UPLOAD_TIMEOUT_SECONDS = 10 * 60
DEFAULT_FOLDER = "portfolio/files"

UPLOAD_RESOURCE_TYPES = ("auto", "image", "video", "raw")
DELETE_RESOURCE_TYPES = ("image", "javascript", "css", "video", "raw")


def get_max_upload_bytes() -> int:
    """Return the per-file upload ceiling, allowing overrides via environment variable."""
    env_value = os.getenv("PORTFOLIO_MAX_UPLOAD_BYTES")
    if env_value:
        try:
            return int(env_value)
        except ValueError:
            logger.warning("Ignoring non-integer PORTFOLIO_MAX_UPLOAD_BYTES=%r", env_value)
    return DEFAULT_MAX_FILE_SIZE


def categorize_file(mime_type: str) -> str:
    """Classify a MIME type as image, document, archive, video or other."""
    if mime_type in IMAGE_MIME_TYPES:
        return "image"
    if mime_type in DOCUMENT_MIME_TYPES:
        return "document"
    if mime_type in ARCHIVE_MIME_TYPES:
        return "archive"
    if mime_type in VIDEO_MIME_TYPES:
        return "video"
    return "other"


def resource_type_for(mime_type: str) -> str:
    """Return the media store resource type a file of this MIME type is stored as."""
    if mime_type in IMAGE_MIME_TYPES:
        return "image"
    if mime_type in VIDEO_MIME_TYPES:
        return "video"
    return "raw"


def _build_public_id(original_name: str) -> str:
    stem = Path(original_name).stem or "file"
    return f"{stem}_{int(time.time() * 1000)}_{uuid4().hex[:6]}"


class FileService:
    """Validate files and move them in and out of a ``MediaStore``."""

    def __init__(
        self,
        store: MediaStore,
        *,
        max_file_size: int | None = None,
        upload_timeout: float = UPLOAD_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self.max_file_size = max_file_size if max_file_size is not None else get_max_upload_bytes()
        self.upload_timeout = upload_timeout

    def validate_file(self, file: IncomingFile | None, max_file_size: int | None = None) -> None:
        """Raise ``ValidationError`` unless ``file`` may be uploaded."""
        if file is None or not file.data:
            raise ValidationError("No file provided for upload")
        if file.mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(f"File type {file.mime_type} is not allowed")
        limit = max_file_size if max_file_size is not None else self.max_file_size
        if file.size > limit:
            raise ValidationError(
                f"File size {file.size} exceeds maximum allowed size {limit}"
            )

    async def upload_file(
        self,
        file: IncomingFile | None,
        folder: str = DEFAULT_FOLDER,
        resource_type: str = "auto",
        options: dict[str, Any] | None = None,
        *,
        max_file_size: int | None = None,
    ) -> UploadResult:
        """Upload a single file.

        Args:
            file: File to upload.
            folder: Media store folder to place the file in.
            resource_type: ``auto`` to classify by MIME type, or an explicit
                ``image``/``video``/``raw``.
            options: Extra media store options (tags, transformations, ...).
            max_file_size: Per-call size ceiling overriding the service default.

        Returns:
            The normalized upload result.

        Raises:
            ValidationError: If the file is missing, of a disallowed type or too large.
            UploadError: If the media store fails or the upload times out.
        """
        self.validate_file(file, max_file_size)
        if resource_type not in UPLOAD_RESOURCE_TYPES:
            raise ValidationError(f"Invalid resource type '{resource_type}'")
        if resource_type == "auto":
            resource_type = resource_type_for(file.mime_type)

        upload_options: dict[str, Any] = {
            "resource_type": resource_type,
            "folder": folder,
            "public_id": _build_public_id(file.original_name),
            **(options or {}),
        }
        if resource_type == "image":
            upload_options["quality"] = "auto"
            upload_options["fetch_format"] = "auto"

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self._store.upload, file.data, upload_options),
                timeout=self.upload_timeout,
            )
        except TimeoutError as exc:
            logger.error("Upload of %s timed out", file.original_name)
            raise UploadError(
                f"File upload timed out after {self.upload_timeout:g} seconds"
            ) from exc
        except Exception as exc:
            logger.error("Upload of %s failed: %s", file.original_name, exc)
            raise UploadError(f"File upload failed: {exc}") from exc

        if not response.get("secure_url") or not response.get("public_id"):
            raise UploadError("File upload failed: media store returned an incomplete response")

        return UploadResult(
            url=response["secure_url"],
            public_id=response["public_id"],
            original_name=file.original_name,
            mime_type=file.mime_type,
            size=file.size,
            resource_type=response.get("resource_type", resource_type),
            format=response.get("format"),
            width=response.get("width"),
            height=response.get("height"),
        )

    async def upload_multiple_files(
        self,
        files: Sequence[IncomingFile],
        folder: str = DEFAULT_FOLDER,
        options: dict[str, Any] | None = None,
        *,
        max_file_size: int | None = None,
    ) -> BatchUploadResult:
        """Upload up to ``MAX_FILES_PER_REQUEST`` files concurrently.

        Raises:
            ValidationError: If ``files`` is empty or too long; raised before
                any upload starts.
        """
        if not files:
            raise ValidationError("No files provided for upload")
        if len(files) > MAX_FILES_PER_REQUEST:
            raise ValidationError(f"Maximum {MAX_FILES_PER_REQUEST} files allowed per request")

        outcomes = await settle_all(
            self.upload_file(file, folder, "auto", options, max_file_size=max_file_size)
            for file in files
        )

        result = BatchUploadResult()
        for file, outcome in zip(files, outcomes, strict=True):
            if outcome.ok:
                result.successful.append(outcome.value)
            else:
                result.failed.append(
                    FailedUpload(file_name=file.original_name, error=str(outcome.error))
                )

        if result.failed:
            logger.warning(
                "Batch upload to %s: %d succeeded, %d failed",
                folder,
                result.success_count,
                result.failure_count,
            )
        return result

    async def upload_content_files(
        self,
        files: Sequence[IncomingFile],
        content_type: str,
        content_id: int,
        *,
        max_file_size: int | None = None,
    ) -> BatchUploadResult:
        """Upload files into the folder and tags reserved for one content record."""
        folder = f"portfolio/{content_type}s/{content_id}"
        options = {"tags": [f"{content_type}:{content_id}", f"{content_type}-file"]}
        return await self.upload_multiple_files(
            files, folder, options, max_file_size=max_file_size
        )

    async def delete_file(self, public_id: str, resource_type: str = "raw") -> bool:
        """Delete a stored file.

        Returns:
            True when the media store acknowledged the deletion; False when it
            reported anything else, such as the file not being found.

        Raises:
            ValidationError: If ``resource_type`` is not a known resource type.
            DeleteError: If the media store call itself fails.
        """
        if resource_type not in DELETE_RESOURCE_TYPES:
            raise ValidationError(f"Invalid resource type '{resource_type}'")

        try:
            response = await asyncio.to_thread(self._store.destroy, public_id, resource_type)
        except Exception as exc:
            logger.error("Failed to delete file %s: %s", public_id, exc)
            raise DeleteError(f"File deletion failed: {exc}") from exc

        if response.get("result") == "ok":
            logger.info("Deleted file %s", public_id)
            return True

        logger.warning("File deletion result %r for %s", response.get("result"), public_id)
        return False

    async def delete_multiple_files(
        self, public_ids: Sequence[str], resource_type: str = "raw"
    ) -> BatchDeleteResult:
        """Delete several files concurrently, reporting each outcome."""
        outcomes = await settle_all(
            self.delete_file(public_id, resource_type) for public_id in public_ids
        )

        result = BatchDeleteResult()
        for public_id, outcome in zip(public_ids, outcomes, strict=True):
            if outcome.ok and outcome.value:
                result.successful.append(public_id)
            elif outcome.ok:
                result.failed.append(
                    FailedDelete(public_id=public_id, error="File not found in media store")
                )
            else:
                result.failed.append(FailedDelete(public_id=public_id, error=str(outcome.error)))
        return result

    async def discard_files(self, references: Iterable[tuple[str, str]], reason: str) -> None:
        """Best-effort removal of stored files; failures are only logged.

        Args:
            references: ``(public_id, resource_type)`` pairs to remove.
            reason: Short description used in the failure log line.
        """
        by_resource_type: dict[str, list[str]] = {}
        for public_id, resource_type in references:
            by_resource_type.setdefault(resource_type, []).append(public_id)
        for resource_type, public_ids in by_resource_type.items():
            result = await self.delete_multiple_files(public_ids, resource_type)
            for failure in result.failed:
                logger.warning(
                    "Could not remove %s %s: %s", reason, failure.public_id, failure.error
                )
