"""Report routes for certificates and projects."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status
from fastapi.responses import JSONResponse

from portfolio_cms.api.dependencies import (
    AuditInfo,
    CurrentUser,
    OptionalUser,
    get_report_service,
    raise_for_failure,
    read_uploads,
)
from portfolio_cms.api.schemas.common import DEFAULT_LIMIT, MAX_LIMIT
from portfolio_cms.api.schemas.content import VisibilityRequest
from portfolio_cms.api.schemas.reports import (
    ReportCreateRequest,
    ReportListResponse,
    ReportResponse,
    ReportStatistics,
    ReportUpdateRequest,
    ReportUploadFailure,
    ReportUploadResponse,
)
from portfolio_cms.services.reports import ReportService


class ParentCollection(str, Enum):
    """Collections whose records can own reports and files."""

    PROJECTS = "projects"
    CERTIFICATES = "certificates"

    @property
    def content_type(self) -> str:
        return self.value[:-1]


router = APIRouter(prefix="/{collection}/{parent_id}/reports", tags=["reports"])

Reports = Annotated[ReportService, Depends(get_report_service)]
ParentId = Annotated[int, Path(ge=1, description="Certificate or project ID")]
ReportId = Annotated[int, Path(ge=1, description="Report ID")]


@router.get(
    "",
    response_model=ReportListResponse,
    summary="List reports",
    description=(
        "Return one page of a record's reports. Anonymous callers only see visible "
        "reports; the admin may filter with ``visible``."
    ),
    responses={404: {"description": "Parent record not found"}},
)
async def list_reports(
    collection: ParentCollection,
    parent_id: ParentId,
    service: Reports,
    current_user: OptionalUser,
    visible: bool | None = Query(default=None, description="Filter by visibility"),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(
        default=DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description=f"Maximum number of reports per page (1-{MAX_LIMIT})",
    ),
) -> dict:
    if current_user is None:
        visible = True
    result = await service.get_reports(
        collection.content_type, parent_id, visible=visible, page=page, limit=limit
    )
    raise_for_failure(result)
    return result


@router.get(
    "/statistics",
    response_model=ReportStatistics,
    summary="Report statistics",
    description="Count a record's reports by visibility and by type.",
    responses={404: {"description": "Parent record not found"}},
)
async def report_statistics(
    collection: ParentCollection, parent_id: ParentId, service: Reports, current_user: CurrentUser
) -> dict:
    result = await service.get_report_statistics(collection.content_type, parent_id)
    raise_for_failure(result)
    return result["statistics"]


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create report",
    description="Append a text or link report to a record.",
    responses={400: {"description": "Invalid report"}, 404: {"description": "Not found"}},
)
async def create_report(
    collection: ParentCollection,
    parent_id: ParentId,
    payload: ReportCreateRequest,
    service: Reports,
    current_user: CurrentUser,
    audit: AuditInfo,
) -> dict:
    result = await service.create_report(
        collection.content_type, parent_id, payload.model_dump(), current_user["id"], audit
    )
    raise_for_failure(result)
    return result["report"]


@router.post(
    "/upload",
    response_model=ReportUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload report files",
    description=(
        "Upload up to 10 files (20 MiB each) and create one file report per file. "
        "If any file fails, no report is created."
    ),
    responses={400: {"model": ReportUploadFailure}, 404: {"description": "Not found"}},
)
async def upload_report_files(
    collection: ParentCollection,
    parent_id: ParentId,
    service: Reports,
    current_user: CurrentUser,
    audit: AuditInfo,
    files: list[UploadFile] = File(..., description="Files to attach as reports"),
) -> dict | JSONResponse:
    incoming = await read_uploads(files)
    result = await service.upload_report_files(
        collection.content_type, parent_id, incoming, current_user["id"], audit
    )
    if not result["success"] and result.get("failed"):
        return JSONResponse(
            status_code=result["status_code"],
            content={"detail": result["error"], "failed": result["failed"]},
        )
    raise_for_failure(result)
    return {"reports": result["reports"]}


@router.put(
    "/{report_id}",
    response_model=ReportResponse,
    summary="Update report",
    description="Update a report. Only provided fields are changed.",
    responses={400: {"description": "Invalid report"}, 404: {"description": "Not found"}},
)
async def update_report(
    collection: ParentCollection,
    parent_id: ParentId,
    report_id: ReportId,
    payload: ReportUpdateRequest,
    service: Reports,
    current_user: CurrentUser,
    audit: AuditInfo,
) -> dict:
    result = await service.update_report(
        collection.content_type,
        parent_id,
        report_id,
        payload.model_dump(exclude_unset=True),
        current_user["id"],
        audit,
    )
    raise_for_failure(result)
    return result["report"]


@router.patch(
    "/{report_id}/visibility",
    response_model=ReportResponse,
    summary="Show or hide report",
    responses={404: {"description": "Not found"}},
)
async def toggle_report_visibility(
    collection: ParentCollection,
    parent_id: ParentId,
    report_id: ReportId,
    payload: VisibilityRequest,
    service: Reports,
    current_user: CurrentUser,
    audit: AuditInfo,
) -> dict:
    result = await service.toggle_report_visibility(
        collection.content_type, parent_id, report_id, payload.visible, current_user["id"], audit
    )
    raise_for_failure(result)
    return result["report"]


@router.delete(
    "/{report_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete report",
    description="Delete a report and its stored file.",
    responses={404: {"description": "Not found"}, 500: {"description": "Media store error"}},
)
async def delete_report(
    collection: ParentCollection,
    parent_id: ParentId,
    report_id: ReportId,
    service: Reports,
    current_user: CurrentUser,
    audit: AuditInfo,
) -> None:
    result = await service.delete_report(
        collection.content_type, parent_id, report_id, current_user["id"], audit
    )
    raise_for_failure(result)
