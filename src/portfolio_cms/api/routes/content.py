"""Routes for the projects, certificates and skills collections.

The three collections share one CRUD surface, so each router is built by
``build_router``. Anonymous callers only see visible records; every mutation
requires a bearer token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from pydantic import BaseModel

from portfolio_cms.api.dependencies import CurrentUser, OptionalUser, get_file_service
from portfolio_cms.api.schemas.content import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CertificateCreateRequest,
    CertificateResponse,
    CertificateUpdateRequest,
    ProjectCreateRequest,
    ProjectResponse,
    ProjectUpdateRequest,
    SkillCreateRequest,
    SkillResponse,
    SkillUpdateRequest,
    VisibilityRequest,
)
from portfolio_cms.services.content import (
    collect_media_references,
    create_record,
    delete_record,
    delete_records,
    get_record,
    list_records,
    set_visibility,
    update_record,
)
from portfolio_cms.services.file_service import FileService


def build_router(
    kind: str,
    label: str,
    response_model: type[BaseModel],
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    *,
    with_visibility: bool = False,
    with_bulk_delete: bool = False,
) -> APIRouter:
    """Build the CRUD router for one content collection."""
    router = APIRouter(prefix=f"/{kind}", tags=[kind])
    not_found = f"{label} not found"
    RecordId = Annotated[int, Path(ge=1, description=f"{label} ID")]
    Files = Annotated[FileService, Depends(get_file_service)]

    @router.get(
        "",
        response_model=list[response_model],
        summary=f"List {kind}",
        description=f"Return all {kind}. Hidden records are only listed for the admin.",
    )
    def list_collection(current_user: OptionalUser) -> list[dict]:
        return list_records(kind, visible_only=current_user is None)

    @router.post(
        "",
        response_model=response_model,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label.lower()}",
        responses={400: {"description": "Validation failed"}},
    )
    def create(payload: create_model, current_user: CurrentUser) -> dict:
        record, error = create_record(kind, payload.model_dump())
        if record is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
        return record

    if with_bulk_delete:

        @router.delete(
            "/bulk",
            response_model=BulkDeleteResponse,
            summary=f"Delete several {kind}",
            description="Delete every listed record; unknown IDs are ignored.",
        )
        async def bulk_delete(
            payload: BulkDeleteRequest, current_user: CurrentUser, file_service: Files
        ) -> BulkDeleteResponse:
            references = []
            for record_id in payload.ids:
                references.extend(collect_media_references(kind, record_id))
            deleted = delete_records(kind, payload.ids)
            await file_service.discard_files(references, f"stored file of deleted {kind} record")
            return BulkDeleteResponse(deleted=deleted)

    @router.get(
        "/{record_id}",
        response_model=response_model,
        summary=f"Get {label.lower()}",
        responses={404: {"description": not_found}},
    )
    def read(record_id: RecordId, current_user: OptionalUser) -> dict:
        record = get_record(kind, record_id)
        if record is None or (current_user is None and not record["visible"]):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return record

    @router.put(
        "/{record_id}",
        response_model=response_model,
        summary=f"Update {label.lower()}",
        description="Update a record. Only provided fields are changed.",
        responses={
            400: {"description": "Validation failed"},
            404: {"description": not_found},
        },
    )
    def update(
        record_id: RecordId,
        payload: update_model,
        current_user: CurrentUser,
    ) -> dict:
        record, error = update_record(kind, record_id, payload.model_dump(exclude_unset=True))
        if error is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return record

    if with_visibility:

        @router.patch(
            "/{record_id}/visibility",
            response_model=response_model,
            summary=f"Show or hide {label.lower()}",
            responses={404: {"description": not_found}},
        )
        def toggle_visibility(
            record_id: RecordId, payload: VisibilityRequest, current_user: CurrentUser
        ) -> dict:
            record = set_visibility(kind, record_id, payload.visible)
            if record is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
            return record

    @router.delete(
        "/{record_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete {label.lower()}",
        description="Delete a record with its reports and files.",
        responses={404: {"description": not_found}},
    )
    async def delete(record_id: RecordId, current_user: CurrentUser, file_service: Files) -> None:
        references = collect_media_references(kind, record_id)
        if not delete_record(kind, record_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        await file_service.discard_files(references, f"stored file of deleted {kind} record")

    return router


projects_router = build_router(
    "projects",
    "Project",
    ProjectResponse,
    ProjectCreateRequest,
    ProjectUpdateRequest,
    with_visibility=True,
)
certificates_router = build_router(
    "certificates",
    "Certificate",
    CertificateResponse,
    CertificateCreateRequest,
    CertificateUpdateRequest,
    with_visibility=True,
)
skills_router = build_router(
    "skills",
    "Skill",
    SkillResponse,
    SkillCreateRequest,
    SkillUpdateRequest,
    with_bulk_delete=True,
)
