"""Data models and type definitions"""

from portfolio_cms.models.errors import (
    DeleteError,
    FileServiceError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from portfolio_cms.models.upload import (
    BatchDeleteResult,
    BatchUploadResult,
    FailedDelete,
    FailedUpload,
    IncomingFile,
    UploadResult,
)

__all__ = [
    "BatchDeleteResult",
    "BatchUploadResult",
    "DeleteError",
    "FailedDelete",
    "FailedUpload",
    "FileServiceError",
    "IncomingFile",
    "NotFoundError",
    "UploadError",
    "UploadResult",
    "ValidationError",
]
