"""Authentication routes for the API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from portfolio_cms.api.dependencies import CurrentUser
from portfolio_cms.api.schemas.auth import LoginRequest, LoginResponse, MeResponse, UserResponse
from portfolio_cms.services.auth import authenticate_user, issue_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Exchange admin credentials for a bearer token.",
    responses={401: {"description": "Invalid credentials"}},
)
def login(payload: LoginRequest) -> LoginResponse:
    user, error = authenticate_user(payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error)
    return LoginResponse(token=issue_token(user["id"]), user=UserResponse(**user))


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Current user",
    description="Return the admin the bearer token belongs to.",
    responses={401: {"description": "Missing, invalid or expired token"}},
)
def me(current_user: CurrentUser) -> MeResponse:
    return MeResponse(user=UserResponse(**current_user))
