"""About section routes for the API."""

from __future__ import annotations

from fastapi import APIRouter

from portfolio_cms.api.dependencies import CurrentUser
from portfolio_cms.api.schemas.content import AboutResponse, AboutUpdateRequest
from portfolio_cms.services.content import get_about, update_about

router = APIRouter(prefix="/about", tags=["about"])


@router.get(
    "",
    response_model=AboutResponse,
    summary="Get about section",
    description="Return the about section, creating an empty one on first access.",
)
def read_about() -> AboutResponse:
    return AboutResponse(**get_about())


@router.put(
    "",
    response_model=AboutResponse,
    summary="Update about section",
    description="Update the about section. Only provided fields are changed.",
    responses={401: {"description": "Authentication required"}},
)
def write_about(payload: AboutUpdateRequest, current_user: CurrentUser) -> AboutResponse:
    return AboutResponse(**update_about(payload.model_dump(exclude_unset=True)))
