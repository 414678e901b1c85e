"""Services"""

from portfolio_cms.services.content_files import ContentFileService
from portfolio_cms.services.file_service import FileService, categorize_file
from portfolio_cms.services.media_store import CloudinaryStore, MediaStore
from portfolio_cms.services.reports import ReportService

__all__ = [
    "CloudinaryStore",
    "ContentFileService",
    "FileService",
    "MediaStore",
    "ReportService",
    "categorize_file",
]
