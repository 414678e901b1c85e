"""Report service for certificates and projects.

Reports are text, link or file entries attached to a parent record. Every
mutation is persisted together with one audit entry. Operations never raise
to the caller: they return ``{"success": True, ...}`` or
``{"success": False, "error": message, "status_code": code}``.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Sequence
from typing import Any

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import Report
from portfolio_cms.data.models.report import REPORT_TYPES
from portfolio_cms.models.errors import FileServiceError, NotFoundError, ValidationError
from portfolio_cms.models.upload import IncomingFile
from portfolio_cms.services.audit import AuditContext, record_audit
from portfolio_cms.services.content import get_parent_record
from portfolio_cms.services.file_service import FileService, resource_type_for

logger = logging.getLogger(__name__)

REPORT_MAX_FILE_SIZE = 20 * 1024 * 1024
DEFAULT_PAGE_SIZE = 10

# Fields a report update may change; the stored file reference is fixed at upload
_UPDATABLE_FIELDS = ("title", "description", "type", "content", "url", "platform", "visible")


def _report_to_dict(report: Report) -> dict:
    return {
        "id": report.id,
        "title": report.title,
        "description": report.description,
        "type": report.type,
        "content": report.content,
        "url": report.url,
        "platform": report.platform,
        "file": report.file,
        "visible": report.visible,
        "created_at": report.created_at,
        "created_by": report.created_by,
    }


def _find_report(parent: Any, report_id: int) -> Report:
    for report in parent.reports:
        if report.id == report_id:
            return report
    raise NotFoundError("Report not found")


def _failure(exc: Exception, **extra: Any) -> dict:
    if isinstance(exc, FileServiceError):
        return {"success": False, "error": exc.message, "status_code": exc.status_code, **extra}
    return {"success": False, "error": str(exc), "status_code": 500, **extra}


class ReportService:
    """Manage the reports list of certificates and projects."""

    def __init__(self, file_service: FileService) -> None:
        self._files = file_service

    async def create_report(
        self,
        content_type: str,
        parent_id: int,
        report_data: dict[str, Any],
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Append a new report to a parent record."""
        try:
            title = (report_data.get("title") or "").strip()
            if not title:
                raise ValidationError("Report title is required")
            report_type = report_data.get("type") or "text"
            if report_type not in REPORT_TYPES:
                raise ValidationError(f"Invalid report type '{report_type}'")

            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                parent.reports.append(
                    Report(
                        title=title,
                        description=report_data.get("description") or "",
                        type=report_type,
                        content=report_data.get("content") or "",
                        url=report_data.get("url"),
                        platform=report_data.get("platform"),
                        file=report_data.get("file"),
                        visible=report_data.get("visible") is not False,
                        created_by=user_id,
                    )
                )
                session.flush()
                created = _report_to_dict(parent.reports[-1])
                record_audit(
                    session,
                    user_id=user_id,
                    action="CREATE_REPORT",
                    entity_type=content_type,
                    entity_id=parent_id,
                    new_value=created,
                    context=context,
                )
            return {"success": True, "report": created}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to create report on %s %s", content_type, parent_id)
            return _failure(exc)

    async def upload_report_files(
        self,
        content_type: str,
        parent_id: int,
        files: Sequence[IncomingFile],
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Upload a batch of files and attach one file report per upload.

        The batch is all-or-nothing at the report level: when any file fails,
        no report is created and the files that did upload are removed from
        the media store again.
        """
        try:
            with get_session() as session:
                get_parent_record(session, content_type, parent_id)

            batch = await self._files.upload_content_files(
                files, content_type, parent_id, max_file_size=REPORT_MAX_FILE_SIZE
            )
            if not batch.success:
                await self._files.discard_files(batch.stored_references(), "orphaned upload")
                failed = [{"file_name": f.file_name, "error": f.error} for f in batch.failed]
                return {
                    "success": False,
                    "error": batch.error_summary(),
                    "status_code": 400,
                    "failed": failed,
                }

            try:
                with get_session() as session:
                    parent = get_parent_record(session, content_type, parent_id)
                    reports = [
                        Report(
                            title=upload.original_name,
                            description="",
                            type="file",
                            file=upload.to_file_reference(),
                            visible=True,
                            created_by=user_id,
                        )
                        for upload in batch.successful
                    ]
                    parent.reports.extend(reports)
                    session.flush()
                    created = [_report_to_dict(r) for r in reports]
                    record_audit(
                        session,
                        user_id=user_id,
                        action="UPLOAD_REPORT_FILES",
                        entity_type=content_type,
                        entity_id=parent_id,
                        new_value=created,
                        context=context,
                    )
            except Exception:
                await self._files.discard_files(batch.stored_references(), "orphaned upload")
                raise

            return {"success": True, "reports": created}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to upload report files to %s %s", content_type, parent_id)
            return _failure(exc)

    async def update_report(
        self,
        content_type: str,
        parent_id: int,
        report_id: int,
        update_data: dict[str, Any],
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Shallow-merge ``update_data`` onto a report."""
        try:
            if "type" in update_data and update_data["type"] not in REPORT_TYPES:
                raise ValidationError(f"Invalid report type '{update_data['type']}'")

            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                report = _find_report(parent, report_id)
                for field in _UPDATABLE_FIELDS:
                    if field in update_data:
                        setattr(report, field, update_data[field])
                session.flush()
                updated = _report_to_dict(report)
                record_audit(
                    session,
                    user_id=user_id,
                    action="UPDATE_REPORT",
                    entity_type=content_type,
                    entity_id=parent_id,
                    new_value=updated,
                    context=context,
                )
            return {"success": True, "report": updated}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to update report %s", report_id)
            return _failure(exc)

    async def delete_report(
        self,
        content_type: str,
        parent_id: int,
        report_id: int,
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Delete a report, removing its stored file from the media store first.

        A media store error keeps the report so the deletion can be retried;
        a file the store no longer knows about does not block removal.
        """
        try:
            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                file_ref = dict(_find_report(parent, report_id).file or {})

            public_id = file_ref.get("public_id")
            if public_id:
                resource_type = file_ref.get("resource_type") or resource_type_for(
                    file_ref.get("mime_type", "")
                )
                if not await self._files.delete_file(public_id, resource_type):
                    logger.warning(
                        "Stored file %s of report %s was already gone", public_id, report_id
                    )

            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                parent.reports.remove(_find_report(parent, report_id))
                record_audit(
                    session,
                    user_id=user_id,
                    action="DELETE_REPORT",
                    entity_type=content_type,
                    entity_id=parent_id,
                    new_value={"report_id": report_id},
                    context=context,
                )
            return {"success": True}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to delete report %s", report_id)
            return _failure(exc)

    async def get_reports(
        self,
        content_type: str,
        parent_id: int,
        *,
        visible: bool | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict:
        """Return one page of a parent's reports, optionally filtered by visibility."""
        try:
            if page < 1 or limit < 1:
                raise ValidationError("page and limit must be positive integers")

            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                reports = list(parent.reports)
                if visible is not None:
                    reports = [r for r in reports if r.visible == visible]

                skip = (page - 1) * limit
                page_items = [_report_to_dict(r) for r in reports[skip : skip + limit]]
                total = len(reports)

            return {
                "success": True,
                "reports": page_items,
                "pagination": {
                    "total": total,
                    "page": page,
                    "limit": limit,
                    "pages": math.ceil(total / limit),
                },
            }
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to get reports of %s %s", content_type, parent_id)
            return _failure(exc, reports=[])

    async def toggle_report_visibility(
        self,
        content_type: str,
        parent_id: int,
        report_id: int,
        visible: bool,
        user_id: int | None,
        context: AuditContext | None = None,
    ) -> dict:
        """Show or hide a single report."""
        try:
            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                report = _find_report(parent, report_id)
                report.visible = visible
                session.flush()
                updated = _report_to_dict(report)
                record_audit(
                    session,
                    user_id=user_id,
                    action="TOGGLE_REPORT_VISIBILITY",
                    entity_type=content_type,
                    entity_id=parent_id,
                    new_value={"report_id": report_id, "visible": visible},
                    context=context,
                )
            return {"success": True, "report": updated}
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception("Failed to toggle visibility of report %s", report_id)
            return _failure(exc)

    async def get_report_statistics(self, content_type: str, parent_id: int) -> dict:
        """Count a parent's reports by visibility and by type."""
        try:
            with get_session() as session:
                parent = get_parent_record(session, content_type, parent_id)
                visible_count = 0
                by_type: Counter[str] = Counter()
                for report in parent.reports:
                    if report.visible:
                        visible_count += 1
                    by_type[report.type] += 1
                total = len(parent.reports)

            return {
                "success": True,
                "statistics": {
                    "total": total,
                    "visible": visible_count,
                    "hidden": total - visible_count,
                    "by_type": dict(by_type),
                },
            }
        except Exception as exc:
            if not isinstance(exc, FileServiceError):
                logger.exception(
                    "Failed to get report statistics of %s %s", content_type, parent_id
                )
            return _failure(exc)
