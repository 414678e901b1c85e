"""Certificate detail extraction for pre-filling the certificate form."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from portfolio_cms.api.dependencies import CurrentUser, get_file_service, read_uploads
from portfolio_cms.api.schemas.content import CertificateDetailsResponse
from portfolio_cms.models.errors import ValidationError
from portfolio_cms.services.certificate_details import extract_certificate_details
from portfolio_cms.services.file_service import FileService

router = APIRouter(prefix="/certificates", tags=["certificates"])

Files = Annotated[FileService, Depends(get_file_service)]


@router.post(
    "/extract-details",
    response_model=CertificateDetailsResponse,
    summary="Extract certificate details",
    description=(
        "Read a PDF or image certificate and return the title, issuer, dates, "
        "credential and skills found in it. Nothing is stored."
    ),
    responses={400: {"description": "Missing, oversized or unsupported file"}},
)
async def extract_details(
    current_user: CurrentUser,
    file_service: Files,
    file: UploadFile = File(..., description="Certificate PDF or image"),
) -> dict:
    (incoming,) = await read_uploads([file])
    try:
        file_service.validate_file(incoming)
        details = await asyncio.to_thread(extract_certificate_details, incoming)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    return {"success": True, "extracted_data": details.to_dict()}
