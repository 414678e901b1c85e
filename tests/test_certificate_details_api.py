"""Tests for the certificate detail extraction endpoint."""

from __future__ import annotations

from portfolio_cms.services import certificate_details

URL = "/api/certificates/extract-details"


def test_requires_auth(client):
    files = {"file": ("cert.pdf", b"%PDF-1.7", "application/pdf")}

    assert client.post(URL, files=files).status_code == 401


def test_returns_extracted_fields(client, auth_headers, monkeypatch):
    monkeypatch.setattr(
        certificate_details,
        "extract_pdf_text",
        lambda data: "has been awarded the Cloud Practitioner Essentials on 2024-05-02.",
    )
    files = {"file": ("aws-cloud.pdf", b"%PDF-1.7", "application/pdf")}

    response = client.post(URL, files=files, headers=auth_headers)

    assert response.status_code == 200, response.text
    data = response.json()["extracted_data"]
    assert data["title"] == "Cloud Practitioner Essentials"
    assert data["issuer"] == "Amazon Web Services"
    assert data["issue_date"] == "2024-05-02"
    assert data["skills"] == ["cloud"]
    assert data["certificate_type"] == "certification"


def test_rejects_unsupported_type(client, auth_headers):
    files = {"file": ("cert.zip", b"PK\x03\x04", "application/zip")}

    response = client.post(URL, files=files, headers=auth_headers)

    assert response.status_code == 400
    assert "PDF and image" in response.json()["detail"]


def test_file_is_required(client, auth_headers):
    assert client.post(URL, headers=auth_headers).status_code == 422
