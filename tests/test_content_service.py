"""Tests for content CRUD on projects, certificates, skills and about."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import ContentFile, Report
from portfolio_cms.services.content import (
    collect_media_references,
    create_record,
    delete_record,
    delete_records,
    get_about,
    get_record,
    list_records,
    set_visibility,
    update_about,
    update_record,
)

pytestmark = pytest.mark.usefixtures("tmp_db")


def _certificate(**overrides) -> dict:
    data = {"title": "Kubernetes Admin", "issuer": "CNCF", "issue_date": date(2024, 1, 10)}
    data.update(overrides)
    return data


def test_create_and_get_project():
    record, error = create_record("projects", {"title": "CMS", "technologies": ["Python"]})

    assert error is None
    assert record["title"] == "CMS"
    assert record["technologies"] == ["Python"]
    assert record["visible"] is True
    assert record["files"] == []
    assert get_record("projects", record["id"])["title"] == "CMS"


def test_create_requires_fields():
    record, error = create_record("certificates", {"title": "No issuer"})
    assert record is None
    assert "issuer" in error and "issue_date" in error


def test_certificate_expiry_must_follow_issue_date():
    record, error = create_record("certificates", _certificate(expiry_date=date(2023, 1, 1)))
    assert record is None
    assert error == "Expiry date must be after issue date"


def test_certificate_type_is_validated():
    record, error = create_record("certificates", _certificate(certificate_type="trophy"))
    assert record is None
    assert "Invalid certificate type" in error


def test_skill_proficiency_range():
    record, error = create_record("skills", {"name": "Python", "proficiency": 120})
    assert record is None
    assert error == "Proficiency must be between 0 and 100"


def test_update_merges_and_validates():
    record, _ = create_record("certificates", _certificate())

    updated, error = update_record("certificates", record["id"], {"issuer": "Linux Foundation"})
    assert error is None
    assert updated["issuer"] == "Linux Foundation"
    assert updated["title"] == "Kubernetes Admin"

    updated, error = update_record(
        "certificates", record["id"], {"expiry_date": date(2020, 1, 1)}
    )
    assert updated is None
    assert error == "Expiry date must be after issue date"


def test_update_missing_record():
    assert update_record("skills", 404, {"name": "x"}) == (None, None)


def test_visible_only_listing():
    create_record("skills", {"name": "Go"})
    hidden, _ = create_record("skills", {"name": "Rust"})
    set_visibility("skills", hidden["id"], False)

    assert [s["name"] for s in list_records("skills")] == ["Go", "Rust"]
    assert [s["name"] for s in list_records("skills", visible_only=True)] == ["Go"]


def test_projects_listed_by_order():
    create_record("projects", {"title": "Second", "order": 2})
    create_record("projects", {"title": "First", "order": 1})
    assert [p["title"] for p in list_records("projects")] == ["First", "Second"]


def test_unknown_collection():
    with pytest.raises(ValueError):
        list_records("posts")


def test_delete_record_and_bulk_delete():
    ids = [create_record("skills", {"name": name})[0]["id"] for name in ("A", "B", "C")]

    assert delete_record("skills", ids[0]) is True
    assert delete_record("skills", ids[0]) is False
    assert delete_records("skills", [ids[1], ids[2], 999]) == 2
    assert list_records("skills") == []


def test_delete_record_propagates_database_errors(monkeypatch):
    record, _ = create_record("skills", {"name": "Go"})

    def failing_delete(self, instance):
        raise OperationalError("DELETE FROM skills", {}, Exception("disk I/O error"))

    with monkeypatch.context() as patch:
        patch.setattr(Session, "delete", failing_delete)
        with pytest.raises(OperationalError):
            delete_record("skills", record["id"])

    assert get_record("skills", record["id"]) is not None


def test_collect_media_references():
    record, _ = create_record("projects", {"title": "Gallery"})
    with get_session() as session:
        session.add(
            ContentFile(
                project_id=record["id"],
                url="https://res.example.com/p/shot.png",
                public_id="p/shot",
                original_name="shot.png",
                mime_type="image/png",
                size=10,
                resource_type="image",
                category="image",
            )
        )
        session.add(
            Report(
                project_id=record["id"],
                title="spec.pdf",
                type="file",
                file={"public_id": "p/spec", "resource_type": "raw"},
            )
        )
        session.add(Report(project_id=record["id"], title="note", type="text"))

    assert sorted(collect_media_references("projects", record["id"])) == [
        ("p/shot", "image"),
        ("p/spec", "raw"),
    ]
    assert collect_media_references("skills", 1) == []


def test_about_singleton():
    about = get_about()
    assert about["name"] == ""
    assert get_about()["id"] == about["id"]

    updated = update_about({"name": "Ada", "social_links": {"github": "https://github.com/ada"}})
    assert updated["id"] == about["id"]
    assert updated["name"] == "Ada"
    assert updated["social_links"]["github"] == "https://github.com/ada"
    assert get_about()["name"] == "Ada"
