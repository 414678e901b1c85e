"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- About: Singleton owner profile
- Configuration: Singleton site presentation settings
- Project / Certificate / Skill: Portfolio content collections
- Report: Text, link or file reports attached to certificates and projects
- ContentFile: Media files attached to certificates and projects
- AuditLog: Append-only trail of admin actions
- User: Admin accounts

All models inherit from the shared Base declarative class defined in data.db.
"""

from portfolio_cms.data.db import Base
from portfolio_cms.data.models.about import About
from portfolio_cms.data.models.audit_log import AuditLog
from portfolio_cms.data.models.certificate import Certificate
from portfolio_cms.data.models.configuration import Configuration
from portfolio_cms.data.models.content_file import ContentFile
from portfolio_cms.data.models.project import Project
from portfolio_cms.data.models.report import Report
from portfolio_cms.data.models.skill import Skill
from portfolio_cms.data.models.user import User

__all__ = [
    "About",
    "AuditLog",
    "Base",
    "Certificate",
    "Configuration",
    "ContentFile",
    "Project",
    "Report",
    "Skill",
    "User",
]
