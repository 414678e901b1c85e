"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class LoginResponse(BaseModel):
    """Bearer token and the authenticated user."""

    token: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse
