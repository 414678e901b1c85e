"""Exception taxonomy shared by the file and report services."""

from __future__ import annotations


class FileServiceError(Exception):
    """Base class for service errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FileServiceError):
    """Raised for bad input: missing or oversized file, disallowed type, too many files."""

    status_code = 400


class UploadError(FileServiceError):
    """Raised when the media store fails to accept an upload."""


class DeleteError(FileServiceError):
    """Raised when the media store fails while deleting a file."""


class NotFoundError(FileServiceError):
    """Raised when a parent record or one of its sub-entities does not exist."""

    status_code = 404
