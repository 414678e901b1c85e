"""Pydantic schemas for the about section and the content collections."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

CertificateType = Literal[
    "course", "workshop", "certification", "award", "degree", "diploma", "badge", "other"
]


class ContentFileResponse(BaseModel):
    """A media file attached to a certificate or project."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    public_id: str
    original_name: str
    mime_type: str
    size: int
    width: int | None = None
    height: int | None = None
    resource_type: str
    category: str
    is_primary: bool
    visible: bool
    uploaded_at: datetime


class AboutResponse(BaseModel):
    """Response schema for the about section."""

    id: int
    name: str
    title: str
    bio: str
    email: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    resume_url: str | None = None
    social_links: dict[str, Any] = Field(default_factory=dict)
    visible: bool
    updated_at: datetime


class AboutUpdateRequest(BaseModel):
    """Partial update of the about section; only provided fields change."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, max_length=120)
    title: str | None = Field(None, max_length=200)
    bio: str | None = None
    email: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    resume_url: str | None = None
    social_links: dict[str, Any] | None = None
    visible: bool | None = None


class ProjectResponse(BaseModel):
    """Response schema for a project."""

    id: int
    title: str
    description: str
    technologies: list[str]
    github_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None
    featured: bool
    visible: bool
    order: int
    start_date: date | None = None
    end_date: date | None = None
    files: list[ContentFileResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProjectCreateRequest(BaseModel):
    """Request schema for creating a project."""

    title: str = Field(..., min_length=1, max_length=200, description="Project title")
    description: str = Field("", description="Project description")
    technologies: list[str] = Field(default_factory=list, description="Technologies used")
    github_url: str | None = Field(None, description="Source repository URL")
    live_url: str | None = Field(None, description="Deployed site URL")
    image_url: str | None = Field(None, description="Cover image URL")
    featured: bool = Field(False, description="Pin to the top of the list")
    visible: bool = Field(True, description="Show on the public site")
    order: int = Field(0, ge=0, description="Display ordering (lower first)")
    start_date: date | None = None
    end_date: date | None = None


class ProjectUpdateRequest(BaseModel):
    """Request schema for updating a project. All fields are optional."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    technologies: list[str] | None = None
    github_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None
    featured: bool | None = None
    visible: bool | None = None
    order: int | None = Field(None, ge=0)
    start_date: date | None = None
    end_date: date | None = None


class CertificateResponse(BaseModel):
    """Response schema for a certificate."""

    id: int
    title: str
    issuer: str
    issue_date: date
    expiry_date: date | None = None
    credential_id: str | None = None
    credential_url: str | None = None
    certificate_type: str
    description: str
    featured: bool
    visible: bool
    files: list[ContentFileResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CertificateCreateRequest(BaseModel):
    """Request schema for creating a certificate."""

    title: str = Field(..., min_length=3, max_length=200, description="Certificate name")
    issuer: str = Field(..., min_length=2, max_length=100, description="Issuing organization")
    issue_date: date = Field(..., description="Issue date (ISO format)")
    expiry_date: date | None = Field(None, description="Expiry date, after issue_date")
    credential_id: str | None = None
    credential_url: str | None = Field(None, description="Verification URL")
    certificate_type: CertificateType = "certification"
    description: str = ""
    featured: bool = False
    visible: bool = True


class CertificateUpdateRequest(BaseModel):
    """Request schema for updating a certificate. All fields are optional."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=3, max_length=200)
    issuer: str | None = Field(None, min_length=2, max_length=100)
    issue_date: date | None = None
    expiry_date: date | None = None
    credential_id: str | None = None
    credential_url: str | None = None
    certificate_type: CertificateType | None = None
    description: str | None = None
    featured: bool | None = None
    visible: bool | None = None


class SkillResponse(BaseModel):
    """Response schema for a skill."""

    id: int
    name: str
    category: str
    proficiency: int
    icon: str | None = None
    visible: bool
    created_at: datetime
    updated_at: datetime


class SkillCreateRequest(BaseModel):
    """Request schema for creating a skill."""

    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field("other", max_length=100)
    proficiency: int = Field(50, ge=0, le=100, description="Proficiency from 0 to 100")
    icon: str | None = None
    visible: bool = True


class SkillUpdateRequest(BaseModel):
    """Request schema for updating a skill. All fields are optional."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    category: str | None = Field(None, max_length=100)
    proficiency: int | None = Field(None, ge=0, le=100)
    icon: str | None = None
    visible: bool | None = None


class VisibilityRequest(BaseModel):
    """Request body for visibility toggles."""

    visible: bool


class BulkDeleteRequest(BaseModel):
    """Request body for deleting several records at once."""

    ids: list[int] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int


class CertificateDetails(BaseModel):
    """Certificate fields recovered from an uploaded file; blank when not found."""

    title: str = ""
    issuer: str = ""
    issue_date: date | None = None
    expiry_date: date | None = None
    credential_id: str = ""
    credential_url: str = ""
    skills: list[str] = Field(default_factory=list)
    certificate_type: CertificateType = "certification"


class CertificateDetailsResponse(BaseModel):
    """Result of scanning a certificate file."""

    success: bool = True
    extracted_data: CertificateDetails
