"""Content service for the about section and the content collections.

This service provides CRUD operations for projects, certificates and skills,
plus read/update of the singleton about record. Collections are addressed by
their REST name (``projects``, ``certificates``, ``skills``); reports and
files address their parent by logical content type (``project``,
``certificate``).
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.data.db import Base, get_session
from portfolio_cms.data.models import About, Certificate, ContentFile, Project, Skill
from portfolio_cms.models.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

__all__ = [
    "COLLECTIONS",
    "PARENT_TYPES",
    "collect_media_references",
    "create_record",
    "delete_record",
    "delete_records",
    "file_to_dict",
    "get_about",
    "get_parent_record",
    "get_record",
    "list_records",
    "set_visibility",
    "update_about",
    "update_record",
]

COLLECTIONS: dict[str, type[Base]] = {
    "projects": Project,
    "certificates": Certificate,
    "skills": Skill,
}

# Logical content types that may own reports and files
PARENT_TYPES: dict[str, type[Project] | type[Certificate]] = {
    "project": Project,
    "certificate": Certificate,
}

_FIELDS: dict[str, tuple[str, ...]] = {
    "projects": (
        "title",
        "description",
        "technologies",
        "github_url",
        "live_url",
        "image_url",
        "featured",
        "visible",
        "order",
        "start_date",
        "end_date",
    ),
    "certificates": (
        "title",
        "issuer",
        "issue_date",
        "expiry_date",
        "credential_id",
        "credential_url",
        "certificate_type",
        "description",
        "featured",
        "visible",
    ),
    "skills": ("name", "category", "proficiency", "icon", "visible"),
}

_REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "projects": ("title",),
    "certificates": ("title", "issuer", "issue_date"),
    "skills": ("name",),
}

_ABOUT_FIELDS = (
    "name",
    "title",
    "bio",
    "email",
    "location",
    "avatar_url",
    "resume_url",
    "social_links",
    "visible",
)


def file_to_dict(content_file: ContentFile) -> dict:
    return {
        "id": content_file.id,
        "url": content_file.url,
        "public_id": content_file.public_id,
        "original_name": content_file.original_name,
        "mime_type": content_file.mime_type,
        "size": content_file.size,
        "width": content_file.width,
        "height": content_file.height,
        "resource_type": content_file.resource_type,
        "category": content_file.category,
        "is_primary": content_file.is_primary,
        "visible": content_file.visible,
        "uploaded_at": content_file.uploaded_at,
    }


def _record_to_dict(kind: str, record: Any) -> dict:
    """Convert a collection model to a dictionary."""
    data = {"id": record.id}
    for field in _FIELDS[kind]:
        data[field] = getattr(record, field)
    data["created_at"] = record.created_at
    data["updated_at"] = record.updated_at
    if kind in ("projects", "certificates"):
        data["files"] = [file_to_dict(f) for f in record.files]
    return data


def _about_to_dict(about: About) -> dict:
    data = {"id": about.id}
    for field in _ABOUT_FIELDS:
        data[field] = getattr(about, field)
    data["updated_at"] = about.updated_at
    return data


def _get_model(kind: str) -> type[Base]:
    model = COLLECTIONS.get(kind)
    if model is None:
        raise ValueError(f"Unknown content collection '{kind}'")
    return model


def _validate_record(kind: str, merged: dict[str, Any]) -> str | None:
    """Validate cross-field rules for a record.

    Returns:
        Error message if validation fails, None if valid.
    """
    if kind == "certificates":
        issue_date = merged.get("issue_date")
        expiry_date = merged.get("expiry_date")
        if issue_date and expiry_date and expiry_date <= issue_date:
            return "Expiry date must be after issue date"
    if kind == "projects":
        start_date = merged.get("start_date")
        end_date = merged.get("end_date")
        if start_date and end_date and end_date < start_date:
            return "end_date cannot be before start_date"
    return None


def _apply_updates(kind: str, record: Any, data: dict[str, Any]) -> None:
    for field in _FIELDS[kind]:
        if field in data:
            setattr(record, field, data[field])


def get_parent_record(
    session: Session, content_type: str, parent_id: int
) -> Project | Certificate:
    """Load the certificate or project that owns reports and files.

    Raises:
        ValidationError: If ``content_type`` cannot own reports.
        NotFoundError: If no such record exists.
    """
    model = PARENT_TYPES.get(content_type)
    if model is None:
        raise ValidationError(f"Unsupported content type '{content_type}'")
    parent = session.get(model, parent_id)
    if parent is None:
        raise NotFoundError(f"{content_type.capitalize()} not found")
    return parent


def list_records(kind: str, *, visible_only: bool = False) -> list[dict]:
    """List a collection, optionally restricted to publicly visible records."""
    model = _get_model(kind)
    with get_session() as session:
        query = session.query(model)
        if visible_only:
            query = query.filter(model.visible.is_(True))
        if kind == "projects":
            query = query.order_by(Project.order, Project.id)
        else:
            query = query.order_by(model.id)
        return [_record_to_dict(kind, r) for r in query.all()]


def get_record(kind: str, record_id: int) -> dict | None:
    """Get a single record, or None if it does not exist."""
    model = _get_model(kind)
    with get_session() as session:
        record = session.get(model, record_id)
        if record is None:
            return None
        return _record_to_dict(kind, record)


def create_record(kind: str, data: dict[str, Any]) -> tuple[dict | None, str | None]:
    """Create a record in a collection.

    Returns:
        Tuple of (created record, error message). On success, error is None.
    """
    model = _get_model(kind)
    missing = [field for field in _REQUIRED_FIELDS[kind] if not data.get(field)]
    if missing:
        return None, f"Missing required field(s): {', '.join(missing)}"

    validation_error = _validate_record(kind, data)
    if validation_error:
        logger.warning("Validation failed for new %s record: %s", kind, validation_error)
        return None, validation_error

    try:
        with get_session() as session:
            record = model()
            _apply_updates(kind, record, data)
            session.add(record)
            session.flush()
            return _record_to_dict(kind, record), None
    except ValueError as exc:
        return None, str(exc)
    except Exception:
        logger.exception("Failed to create %s record", kind)
        return None, "Creation failed"


def update_record(
    kind: str, record_id: int, data: dict[str, Any]
) -> tuple[dict | None, str | None]:
    """Apply a partial update to a record.

    Returns:
        Tuple of (updated record, error message). A missing record yields
        ``(None, None)`` so callers can answer 404.
    """
    model = _get_model(kind)
    try:
        with get_session() as session:
            record = session.get(model, record_id)
            if record is None:
                return None, None

            merged = _record_to_dict(kind, record)
            merged.update(data)
            validation_error = _validate_record(kind, merged)
            if validation_error:
                logger.warning(
                    "Validation failed for %s %d update: %s", kind, record_id, validation_error
                )
                return None, validation_error

            _apply_updates(kind, record, data)
            session.flush()
            return _record_to_dict(kind, record), None
    except ValueError as exc:
        return None, str(exc)
    except Exception:
        logger.exception("Failed to update %s %d", kind, record_id)
        return None, "Update failed"


def set_visibility(kind: str, record_id: int, visible: bool) -> dict | None:
    """Show or hide a record; returns None if it does not exist."""
    record, _ = update_record(kind, record_id, {"visible": visible})
    return record


def collect_media_references(kind: str, record_id: int) -> list[tuple[str, str]]:
    """Return ``(public_id, resource_type)`` for every stored file owned by a record.

    Covers the record's attached files and its file reports, which are removed
    from the database by cascade when the record is deleted.
    """
    if kind not in ("projects", "certificates"):
        return []
    model = _get_model(kind)
    with get_session() as session:
        record = session.get(model, record_id)
        if record is None:
            return []
        references = [(f.public_id, f.resource_type) for f in record.files]
        for report in record.reports:
            if report.file and report.file.get("public_id"):
                references.append(
                    (report.file["public_id"], report.file.get("resource_type") or "raw")
                )
        return references


def delete_record(kind: str, record_id: int) -> bool:
    """Delete a record together with its reports and files rows.

    Returns:
        True if the record was deleted, False if it does not exist. Database
        errors propagate to the caller.
    """
    model = _get_model(kind)
    with get_session() as session:
        record = session.get(model, record_id)
        if record is None:
            return False
        session.delete(record)
        return True


def delete_records(kind: str, record_ids: list[int]) -> int:
    """Delete several records at once and return how many existed."""
    model = _get_model(kind)
    with get_session() as session:
        records = session.query(model).filter(model.id.in_(record_ids)).all()
        for record in records:
            session.delete(record)
        return len(records)


def get_about() -> dict:
    """Return the about record, creating an empty one on first access."""
    with get_session() as session:
        about = session.query(About).order_by(About.id).first()
        if about is None:
            about = About()
            session.add(about)
            session.flush()
        return _about_to_dict(about)


def update_about(data: dict[str, Any]) -> dict:
    """Apply a partial update to the about record and return it."""
    with get_session() as session:
        about = session.query(About).order_by(About.id).first()
        if about is None:
            about = About()
            session.add(about)
        for field in _ABOUT_FIELDS:
            if field in data:
                setattr(about, field, data[field])
        session.flush()
        return _about_to_dict(about)
