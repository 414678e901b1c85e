"""Site configuration service.

The configuration is a single row of JSON sections. Reads create it from
defaults on first access; defaults pick up the owner's name, bio and contact
details from the about record when one exists. Updates merge each provided
section into the stored one key by key, except ``navigation``, which is
replaced as a whole list.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from sqlalchemy.orm import Session

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import About, Configuration
from portfolio_cms.models.errors import ValidationError
from portfolio_cms.services.audit import AuditContext, record_audit

logger = logging.getLogger(__name__)

SECTIONS = (
    "site_info",
    "branding",
    "contact_info",
    "social_links",
    "stats",
    "seo",
    "theme",
    "profile_photo",
    "settings",
    "navigation",
    "footer",
)

DEFAULT_CONFIGURATION: dict[str, Any] = {
    "site_info": {
        "name": "",
        "title": "",
        "short_bio": "",
        "bio": "",
        "bio_paragraphs": [],
        "tagline": "",
        "website": "",
    },
    "branding": {"logo": "", "icon": ""},
    "contact_info": {"email": "", "phone": "", "location": "", "address": ""},
    "social_links": {
        "github": "",
        "linkedin": "",
        "twitter": "",
        "website": "",
        "email": "",
        "phone": "",
    },
    "stats": {
        "years_experience": 0,
        "projects_count": 0,
        "technologies_count": 0,
        "certificates_count": 0,
    },
    "seo": {"title": "", "description": "", "keywords": "", "author": "", "og_image": ""},
    "theme": {
        "primary_color": "#3B82F6",
        "secondary_color": "#1E40AF",
        "accent_color": "#F59E0B",
        "background_color": "#F9FAFB",
        "text_color": "#111827",
    },
    "profile_photo": {"url": "", "alt": "Profile Photo"},
    "settings": {
        "show_resume": True,
        "show_projects": True,
        "show_skills": True,
        "show_certificates": True,
        "show_contact": True,
        "show_github": True,
        "enable_contact_form": True,
        "maintenance_mode": False,
        "maintenance_message": "Site is under maintenance. Please check back later.",
    },
    "navigation": [
        {"name": "Home", "href": "/", "visible": True},
        {"name": "About", "href": "#about", "visible": True},
        {"name": "Projects", "href": "#projects", "visible": True},
        {"name": "Skills", "href": "#skills", "visible": True},
        {"name": "Contact", "href": "#contact", "visible": True},
    ],
    "footer": {"brand_name": "", "description": "", "website": "", "show_admin_link": True},
}


def default_configuration(about: About | None = None) -> dict[str, Any]:
    """Return a fresh copy of the defaults, filled from ``about`` when given."""
    config = copy.deepcopy(DEFAULT_CONFIGURATION)
    if about is None:
        return config

    links = about.social_links or {}
    website = links.get("website", "")
    email = about.email or ""
    config["site_info"].update(name=about.name, title=about.title, bio=about.bio, website=website)
    config["contact_info"].update(email=email, location=about.location or "")
    config["social_links"].update({k: v for k, v in links.items() if isinstance(v, str)})
    config["social_links"]["email"] = email
    config["seo"].update(author=about.name, og_image=about.avatar_url or "")
    if about.name:
        config["seo"]["title"] = f"{about.name} - Portfolio"
        config["profile_photo"]["alt"] = about.name
    config["profile_photo"]["url"] = about.avatar_url or ""
    config["footer"].update(brand_name=about.name, website=website)
    return config


def _to_dict(config: Configuration) -> dict:
    data: dict[str, Any] = {"id": config.id}
    for section in SECTIONS:
        data[section] = getattr(config, section)
    data["updated_at"] = config.updated_at
    return data


def _apply(config: Configuration, values: dict[str, Any]) -> None:
    for section, value in values.items():
        setattr(config, section, copy.deepcopy(value))


def _load(session: Session) -> Configuration:
    config = session.query(Configuration).order_by(Configuration.id).first()
    if config is None:
        about = session.query(About).order_by(About.id).first()
        config = Configuration()
        _apply(config, default_configuration(about))
        session.add(config)
        session.flush()
        logger.info("Created default site configuration")
    return config


def _merge(section: str, current: Any, incoming: Any) -> Any:
    if section == "navigation":
        if not isinstance(incoming, list):
            raise ValidationError("navigation must be a list")
        return incoming
    if not isinstance(incoming, dict):
        raise ValidationError(f"{section} must be an object")
    # New dict so the JSON column registers the change
    return {**(current or {}), **incoming}


def get_configuration() -> dict:
    """Return the site configuration, creating it from defaults on first access."""
    with get_session() as session:
        return _to_dict(_load(session))


def update_configuration(
    data: dict[str, Any],
    user_id: int | None = None,
    context: AuditContext | None = None,
) -> dict:
    """Merge the provided sections into the stored configuration.

    Raises:
        ValidationError: If a section name is unknown or has the wrong shape.
    """
    unknown = sorted(set(data) - set(SECTIONS))
    if unknown:
        raise ValidationError(f"Unknown configuration section: {', '.join(unknown)}")

    with get_session() as session:
        config = _load(session)
        merged = {
            section: _merge(section, getattr(config, section), value)
            for section, value in data.items()
        }
        _apply(config, merged)
        session.flush()
        record_audit(
            session,
            user_id=user_id,
            action="UPDATE_CONFIGURATION",
            entity_type="configuration",
            entity_id=config.id,
            new_value=sorted(data),
            context=context,
        )
        return _to_dict(config)


def reset_configuration(
    user_id: int | None = None, context: AuditContext | None = None
) -> dict:
    """Overwrite every section with the defaults and return the result."""
    with get_session() as session:
        config = _load(session)
        about = session.query(About).order_by(About.id).first()
        _apply(config, default_configuration(about))
        session.flush()
        record_audit(
            session,
            user_id=user_id,
            action="RESET_CONFIGURATION",
            entity_type="configuration",
            entity_id=config.id,
            context=context,
        )
        logger.info("Site configuration reset to defaults")
        return _to_dict(config)
