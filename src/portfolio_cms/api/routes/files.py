"""Routes for media files attached to certificates and projects."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile, status

from portfolio_cms.api.dependencies import (
    AuditInfo,
    CurrentUser,
    OptionalUser,
    get_content_file_service,
    raise_for_failure,
    read_uploads,
)
from portfolio_cms.api.routes.reports import ParentCollection
from portfolio_cms.api.schemas.files import FileListResponse, FileUploadResponse
from portfolio_cms.services.content_files import ContentFileService

router = APIRouter(prefix="/{collection}/{parent_id}/files", tags=["files"])

ContentFiles = Annotated[ContentFileService, Depends(get_content_file_service)]
ParentId = Annotated[int, Path(ge=1, description="Certificate or project ID")]
FileId = Annotated[int, Path(ge=1, description="File ID")]


@router.get(
    "",
    response_model=FileListResponse,
    summary="List files",
    responses={404: {"description": "Parent record not found"}},
)
def list_files(
    collection: ParentCollection,
    parent_id: ParentId,
    service: ContentFiles,
    current_user: OptionalUser,
) -> dict:
    result = service.list_files(
        collection.content_type, parent_id, visible_only=current_user is None
    )
    raise_for_failure(result)
    return {"files": result["files"]}


@router.post(
    "",
    response_model=FileUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload files",
    description=(
        "Upload up to 10 files and attach them to the record. Files that fail are "
        "listed in ``failed``; the others are still attached."
    ),
    responses={400: {"description": "No file could be uploaded"}},
)
async def upload_files(
    collection: ParentCollection,
    parent_id: ParentId,
    service: ContentFiles,
    current_user: CurrentUser,
    audit: AuditInfo,
    files: list[UploadFile] = File(..., description="Files to attach"),
) -> dict:
    incoming = await read_uploads(files)
    result = await service.attach_files(
        collection.content_type, parent_id, incoming, current_user["id"], audit
    )
    raise_for_failure(result)
    return result


@router.delete(
    "/{file_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete file",
    description="Delete a file from the media store and detach it from the record.",
    responses={404: {"description": "Not found"}, 500: {"description": "Media store error"}},
)
async def delete_file(
    collection: ParentCollection,
    parent_id: ParentId,
    file_id: FileId,
    service: ContentFiles,
    current_user: CurrentUser,
    audit: AuditInfo,
) -> None:
    result = await service.remove_file(
        collection.content_type, parent_id, file_id, current_user["id"], audit
    )
    raise_for_failure(result)


@router.patch(
    "/{file_id}/primary",
    response_model=FileListResponse,
    summary="Set primary file",
    description="Make one file the record's primary file.",
    responses={404: {"description": "Not found"}},
)
def set_primary_file(
    collection: ParentCollection,
    parent_id: ParentId,
    file_id: FileId,
    service: ContentFiles,
    current_user: CurrentUser,
    audit: AuditInfo,
) -> dict:
    result = service.set_primary(
        collection.content_type, parent_id, file_id, current_user["id"], audit
    )
    raise_for_failure(result)
    return {"files": result["files"]}
