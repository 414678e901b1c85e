"""Append-only audit trail for admin actions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import AuditLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuditContext:
    """Request metadata recorded alongside an audit entry."""

    ip_address: str | None = None
    user_agent: str | None = None


def _to_json_value(value: Any) -> Any:
    """Return ``value`` with dates and other non-JSON types rendered as strings."""
    return json.loads(json.dumps(value, default=str))


def record_audit(
    session: Session,
    *,
    user_id: int | None,
    action: str,
    entity_type: str,
    entity_id: int,
    new_value: Any = None,
    context: AuditContext | None = None,
) -> AuditLog:
    """Add an audit entry to ``session``; it commits with the caller's change."""
    context = context or AuditContext()
    entry = AuditLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        new_value=_to_json_value(new_value),
        ip_address=context.ip_address,
        user_agent=context.user_agent,
    )
    session.add(entry)
    logger.info("Audit %s on %s %s by user %s", action, entity_type, entity_id, user_id)
    return entry


def get_audit_entries(
    entity_type: str | None = None,
    entity_id: int | None = None,
    limit: int = 50,
) -> list[dict]:
    """Return the most recent audit entries, newest first."""
    with get_session() as session:
        query = session.query(AuditLog)
        if entity_type is not None:
            query = query.filter(AuditLog.entity_type == entity_type)
        if entity_id is not None:
            query = query.filter(AuditLog.entity_id == entity_id)
        entries = query.order_by(AuditLog.id.desc()).limit(limit).all()
        return [
            {
                "id": entry.id,
                "user_id": entry.user_id,
                "action": entry.action,
                "entity_type": entry.entity_type,
                "entity_id": entry.entity_id,
                "new_value": entry.new_value,
                "ip_address": entry.ip_address,
                "user_agent": entry.user_agent,
                "created_at": entry.created_at,
            }
            for entry in entries
        ]
