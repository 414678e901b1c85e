"""Files attached to certificates and projects.

Uploaded files are stored in the media store and recorded as ``ContentFile``
rows on their parent. One file per parent may be flagged as primary; the
public site uses it as the record's preview.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import ContentFile
from portfolio_cms.models.errors import FileServiceError, NotFoundError
from portfolio_cms.models.upload import IncomingFile
from portfolio_cms.services.audit import AuditContext, record_audit
from portfolio_cms.services.content import file_to_dict, get_parent_record
from portfolio_cms.services.file_service import FileService, categorize_file

logger = logging.getLogger(__name__)


def _find_file(parent: object, file_id: int) -> ContentFile:
    for content_file in parent.files:
        if content_file.id == file_id:
            return content_file
    raise NotFoundError("File not found")


def _failure(exc: Exception) -> dict:
    if isinstance(exc, FileServiceError):
        return {"success": False, "error": exc.message, "status_code": exc.status_code}
    return {"success": False, "error": str(exc), "status_code": 500}


class ContentFileService:
    """Attach, detach and rank media files on a parent record."""

    def __init__(self, file_service: FileService) -> None:
        self._files = file_service

    def list_files(
        self, content_type: str, parent_id: int, *, visible_only: bool = False
    ) -> dict:
        try:
            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                files = [
                    file_to_dict(f) for f in parent.files if f.visible or not visible_only
                ]
            return {"success": True, "files": files}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to list files of %s %s", content_type, parent_id)
            return _failure(exc)

    async def attach_files(
        self,
        content_type: str,
        parent_id: int,
        files: Sequence[IncomingFile],
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Upload files and attach every successful upload to the parent.

        Unlike report uploads, a partially failed batch still attaches the
        files that made it; the failures are returned alongside.
        """
        try:
            with get_session() as session:
                get_parent_record(session, content_type, parent_id)

            batch = await self._files.upload_content_files(files, content_type, parent_id)
            failed = [{"file_name": f.file_name, "error": f.error} for f in batch.failed]
            if not batch.successful:
                return {
                    "success": False,
                    "error": batch.error_summary(),
                    "status_code": 400,
                    "failed": failed,
                }

            try:
                with get_session() as session:
                    parent = get_parent_record(session, content_type, parent_id)
                    needs_primary = not any(f.is_primary for f in parent.files)
                    attached = []
                    for upload in batch.successful:
                        category = categorize_file(upload.mime_type)
                        content_file = ContentFile(
                            url=upload.url,
                            public_id=upload.public_id,
                            original_name=upload.original_name,
                            mime_type=upload.mime_type,
                            size=upload.size,
                            width=upload.width,
                            height=upload.height,
                            resource_type=upload.resource_type,
                            category=category,
                            is_primary=needs_primary and category == "image",
                            uploaded_at=upload.uploaded_at,
                        )
                        if content_file.is_primary:
                            needs_primary = False
                        parent.files.append(content_file)
                        attached.append(content_file)
                    session.flush()
                    created = [file_to_dict(f) for f in attached]
                    record_audit(
                        session,
                        user_id=user_id,
                        action="UPLOAD_FILES",
                        entity_type=content_type,
                        entity_id=parent_id,
                        new_value=created,
                        context=context,
                    )
            except Exception:
                await self._files.discard_files(batch.stored_references(), "orphaned upload")
                raise

            return {"success": batch.success, "files": created, "failed": failed}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to attach files to %s %s", content_type, parent_id)
            return _failure(exc)

    async def remove_file(
        self,
        content_type: str,
        parent_id: int,
        file_id: int,
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Delete a file from the media store, then detach it from its parent."""
        try:
            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                content_file = _find_file(parent, file_id)
                public_id, resource_type = content_file.public_id, content_file.resource_type

            if not await self._files.delete_file(public_id, resource_type):
                logger.warning("Stored file %s was already gone", public_id)

            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                content_file = _find_file(parent, file_id)
                was_primary = content_file.is_primary
                parent.files.remove(content_file)
                if was_primary:
                    replacement = next((f for f in parent.files if f.category == "image"), None)
                    if replacement is not None:
                        replacement.is_primary = True
                record_audit(
                    session,
                    user_id=user_id,
                    action="DELETE_FILE",
                    entity_type=content_type,
                    entity_id=parent_id,
                    new_value={"file_id": file_id, "public_id": public_id},
                    context=context,
                )
            return {"success": True}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to remove file %s", file_id)
            return _failure(exc)

    def set_primary(
        self,
        content_type: str,
        parent_id: int,
        file_id: int,
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Make one file the parent's primary file."""
        try:
            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                target = _find_file(parent, file_id)
                for content_file in parent.files:
                    content_file.is_primary = content_file is target
                session.flush()
                files = [file_to_dict(f) for f in parent.files]
                record_audit(
                    session,
                    user_id=user_id,
                    action="SET_PRIMARY_FILE",
                    entity_type=content_type,
                    entity_id=parent_id,
                    new_value={"file_id": file_id},
                    context=context,
                )
            return {"success": True, "files": files}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to set primary file %s", file_id)
            return _failure(exc)
