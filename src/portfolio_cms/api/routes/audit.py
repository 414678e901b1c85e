"""Read-only access to the audit trail."""

from __future__ import annotations

from fastapi import APIRouter, Query

from portfolio_cms.api.dependencies import CurrentUser
from portfolio_cms.api.schemas.audit import AuditEntryResponse
from portfolio_cms.api.schemas.common import MAX_LIMIT
from portfolio_cms.services.audit import get_audit_entries

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get(
    "",
    response_model=list[AuditEntryResponse],
    summary="List audit entries",
    description="Return the most recent admin actions, newest first.",
)
def list_audit_entries(
    current_user: CurrentUser,
    entity_type: str | None = Query(default=None, description="project or certificate"),
    entity_id: int | None = Query(default=None, ge=1),
    limit: int = Query(default=50, ge=1, le=MAX_LIMIT),
) -> list[dict]:
    return get_audit_entries(entity_type, entity_id, limit)
