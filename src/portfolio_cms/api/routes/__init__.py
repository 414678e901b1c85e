"""Route handlers for the API."""

from portfolio_cms.api.routes import (
    about,
    audit,
    auth,
    certificate_details,
    configuration,
    content,
    files,
    health,
    reports,
)

__all__ = [
    "about",
    "audit",
    "auth",
    "certificate_details",
    "configuration",
    "content",
    "files",
    "health",
    "reports",
]
