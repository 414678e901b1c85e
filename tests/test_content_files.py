"""Tests for files attached to certificates and projects."""

from __future__ import annotations

import asyncio

import pytest

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import AuditLog, Project
from portfolio_cms.services.content_files import ContentFileService


@pytest.fixture
def service(tmp_db, file_service) -> ContentFileService:
    return ContentFileService(file_service)


@pytest.fixture
def project_id(tmp_db) -> int:
    with get_session() as session:
        project = Project(title="Gallery")
        session.add(project)
        session.flush()
        return project.id


def _attach(service, project_id, files):
    return asyncio.run(service.attach_files("project", project_id, files, 1))


def test_first_image_becomes_primary(service, project_id, make_file):
    result = _attach(
        service,
        project_id,
        [make_file("brief.pdf"), make_file("a.png", "image/png"), make_file("b.png", "image/png")],
    )

    assert result["success"] is True
    assert [f["is_primary"] for f in result["files"]] == [False, True, False]
    assert [f["category"] for f in result["files"]] == ["document", "image", "image"]


def test_partial_batch_still_attaches_successes(service, project_id, media_store, make_file):
    media_store.fail_stems.add("broken")

    result = _attach(service, project_id, [make_file("a.pdf"), make_file("broken.pdf")])

    assert result["success"] is False
    assert [f["original_name"] for f in result["files"]] == ["a.pdf"]
    assert result["failed"][0]["file_name"] == "broken.pdf"
    listed = service.list_files("project", project_id)
    assert len(listed["files"]) == 1


def test_all_failed_batch_is_an_error(service, project_id, make_file):
    result = _attach(service, project_id, [make_file("x.exe", "application/x-msdownload")])
    assert result["success"] is False
    assert result["status_code"] == 400


def test_uploads_removed_when_parent_disappears_mid_batch(
    service, project_id, file_service, media_store, make_file, monkeypatch
):
    upload_content_files = file_service.upload_content_files

    async def upload_then_delete_parent(*args, **kwargs):
        batch = await upload_content_files(*args, **kwargs)
        with get_session() as session:
            session.delete(session.get(Project, project_id))
        return batch

    monkeypatch.setattr(file_service, "upload_content_files", upload_then_delete_parent)

    result = _attach(service, project_id, [make_file("a.pdf"), make_file("b.png", "image/png")])

    assert result == {"success": False, "error": "Project not found", "status_code": 404}
    assert len(media_store.uploads) == 2
    assert media_store.stored == set()
    assert sorted(resource_type for _, resource_type in media_store.destroyed) == ["image", "raw"]


def test_remove_primary_promotes_next_image(service, project_id, media_store, make_file):
    attached = _attach(
        service, project_id, [make_file("a.png", "image/png"), make_file("b.png", "image/png")]
    )
    primary = attached["files"][0]

    result = asyncio.run(service.remove_file("project", project_id, primary["id"], 1))

    assert result == {"success": True}
    assert media_store.destroyed == [(primary["public_id"], "image")]
    remaining = service.list_files("project", project_id)["files"]
    assert len(remaining) == 1
    assert remaining[0]["is_primary"] is True


def test_remove_kept_when_store_fails(service, project_id, media_store, make_file):
    attached = _attach(service, project_id, [make_file("a.pdf")])
    media_store.destroy_error = RuntimeError("network down")

    result = asyncio.run(
        service.remove_file("project", project_id, attached["files"][0]["id"], 1)
    )

    assert result["success"] is False
    assert len(service.list_files("project", project_id)["files"]) == 1


def test_set_primary(service, project_id, make_file):
    attached = _attach(
        service, project_id, [make_file("a.png", "image/png"), make_file("b.png", "image/png")]
    )
    second = attached["files"][1]

    result = service.set_primary("project", project_id, second["id"], 1)

    assert [f["is_primary"] for f in result["files"]] == [False, True]
    with get_session() as session:
        actions = [entry.action for entry in session.query(AuditLog).order_by(AuditLog.id)]
    assert actions == ["UPLOAD_FILES", "SET_PRIMARY_FILE"]


def test_unknown_file(service, project_id):
    result = service.set_primary("project", project_id, 99, 1)
    assert result["status_code"] == 404
