"""Tests for content file endpoints."""

from __future__ import annotations

import pytest


@pytest.fixture
def project_url(client, auth_headers) -> str:
    project = client.post("/api/projects", json={"title": "Gallery"}, headers=auth_headers).json()
    return f"/api/projects/{project['id']}/files"


def test_upload_list_and_delete_files(client, auth_headers, project_url, media_store):
    response = client.post(
        project_url,
        files=[
            ("files", ("cover.png", b"\x89PNG", "image/png")),
            ("files", ("brief.pdf", b"%PDF", "application/pdf")),
        ],
        headers=auth_headers,
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["success"] is True
    assert body["failed"] == []
    cover, brief = body["files"]
    assert cover["is_primary"] is True
    assert brief["category"] == "document"

    listed = client.get(project_url).json()["files"]
    assert [f["original_name"] for f in listed] == ["cover.png", "brief.pdf"]

    response = client.delete(f"{project_url}/{brief['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert (brief["public_id"], "raw") in media_store.destroyed


def test_partial_upload_reports_failures(client, auth_headers, project_url):
    response = client.post(
        project_url,
        files=[
            ("files", ("cover.png", b"\x89PNG", "image/png")),
            ("files", ("page.html", b"<html>", "text/html")),
        ],
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is False
    assert [f["original_name"] for f in body["files"]] == ["cover.png"]
    assert body["failed"][0]["file_name"] == "page.html"


def test_too_many_files(client, auth_headers, project_url, media_store):
    files = [("files", (f"f{i}.pdf", b"%PDF", "application/pdf")) for i in range(11)]

    response = client.post(project_url, files=files, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Maximum 10 files allowed per request"
    assert media_store.uploads == []


def test_set_primary_file(client, auth_headers, project_url):
    uploaded = client.post(
        project_url,
        files=[
            ("files", ("a.png", b"\x89PNG", "image/png")),
            ("files", ("b.png", b"\x89PNG", "image/png")),
        ],
        headers=auth_headers,
    ).json()["files"]

    response = client.patch(f"{project_url}/{uploaded[1]['id']}/primary", headers=auth_headers)

    assert response.status_code == 200
    assert [f["is_primary"] for f in response.json()["files"]] == [False, True]


def test_files_of_missing_project(client):
    response = client.get("/api/projects/999/files")
    assert response.status_code == 404
