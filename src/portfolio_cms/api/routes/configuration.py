"""Site configuration routes for the API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from portfolio_cms.api.dependencies import AuditInfo, CurrentUser
from portfolio_cms.api.schemas.configuration import (
    ConfigurationResponse,
    ConfigurationUpdateRequest,
)
from portfolio_cms.models.errors import ValidationError
from portfolio_cms.services.configuration import (
    get_configuration,
    reset_configuration,
    update_configuration,
)

router = APIRouter(prefix="/configuration", tags=["configuration"])


@router.get(
    "",
    response_model=ConfigurationResponse,
    summary="Get site configuration",
    description="Return the site configuration, creating the defaults on first access.",
)
def read_configuration() -> dict:
    return get_configuration()


@router.put(
    "",
    response_model=ConfigurationResponse,
    summary="Update site configuration",
    description="Merge the provided sections into the configuration.",
    responses={
        400: {"description": "Validation failed"},
        401: {"description": "Authentication required"},
    },
)
def write_configuration(
    payload: ConfigurationUpdateRequest, current_user: CurrentUser, audit: AuditInfo
) -> dict:
    values = payload.model_dump(exclude_none=True)
    try:
        return update_configuration(values, current_user["id"], audit)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc


@router.post(
    "/reset",
    response_model=ConfigurationResponse,
    summary="Reset site configuration",
    description="Replace every section with the defaults.",
    responses={401: {"description": "Authentication required"}},
)
def reset(current_user: CurrentUser, audit: AuditInfo) -> dict:
    return reset_configuration(current_user["id"], audit)
