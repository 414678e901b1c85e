"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, UploadFile, status

from portfolio_cms.models.upload import IncomingFile
from portfolio_cms.services.audit import AuditContext
from portfolio_cms.services.auth import get_user, verify_token
from portfolio_cms.services.content_files import ContentFileService
from portfolio_cms.services.file_service import FileService
from portfolio_cms.services.media_store import CloudinaryStore
from portfolio_cms.services.reports import ReportService

_file_service: FileService | None = None


def _user_from_authorization(authorization: str | None) -> dict | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    user_id = verify_token(token.strip())
    if user_id is None:
        return None
    return get_user(user_id)


def get_current_user(
    authorization: Annotated[
        str | None,
        Header(description="Bearer token returned by POST /api/auth/login."),
    ] = None,
) -> dict:
    """Return the authenticated admin.

    Raises:
        HTTPException: If the token is missing, invalid or expired (401).
    """
    user = _user_from_authorization(authorization)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(
    authorization: Annotated[str | None, Header()] = None,
) -> dict | None:
    """Return the authenticated admin, or None for anonymous callers.

    Public read endpoints use this to decide whether hidden records are shown.
    """
    return _user_from_authorization(authorization)


def get_audit_context(request: Request) -> AuditContext:
    """Capture the caller's address and user agent for the audit log."""
    return AuditContext(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_file_service() -> FileService:
    """Return the process-wide FileService, building the Cloudinary store on first use."""
    global _file_service
    if _file_service is None:
        _file_service = FileService(CloudinaryStore())
    return _file_service


def get_report_service(
    file_service: Annotated[FileService, Depends(get_file_service)],
) -> ReportService:
    return ReportService(file_service)


def get_content_file_service(
    file_service: Annotated[FileService, Depends(get_file_service)],
) -> ContentFileService:
    return ContentFileService(file_service)


async def read_uploads(files: list[UploadFile]) -> list[IncomingFile]:
    """Read multipart uploads into memory for the file services."""
    incoming = []
    for upload in files:
        incoming.append(
            IncomingFile(
                original_name=upload.filename or "file",
                mime_type=upload.content_type or "application/octet-stream",
                data=await upload.read(),
            )
        )
    return incoming


def raise_for_failure(result: dict) -> None:
    """Translate a service failure dict into an ``HTTPException``."""
    if not result.get("success"):
        raise HTTPException(
            status_code=result.get("status_code", status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=result.get("error") or "Request failed",
        )


CurrentUser = Annotated[dict, Depends(get_current_user)]
OptionalUser = Annotated[dict | None, Depends(get_optional_user)]
AuditInfo = Annotated[AuditContext, Depends(get_audit_context)]
