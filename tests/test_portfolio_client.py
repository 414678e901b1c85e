"""Tests for the async REST client."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from portfolio_cms.client.api_client import (
    UPLOAD_CHUNK_SIZE,
    ApiError,
    PortfolioApiClient,
    get_api_base_url,
)


def _client(handler, **kwargs) -> PortfolioApiClient:
    return PortfolioApiClient(
        "http://testserver", transport=httpx.MockTransport(handler), **kwargs
    )


def test_base_url_from_environment(monkeypatch):
    monkeypatch.delenv("PORTFOLIO_API_BASE_URL", raising=False)
    assert get_api_base_url() == "http://localhost:8000"
    monkeypatch.setenv("PORTFOLIO_API_BASE_URL", "https://cms.example.com/")
    assert get_api_base_url() == "https://cms.example.com"


def test_bearer_token_is_sent_when_available():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json=[])

    token = {"value": None}
    client = _client(handler, token_provider=lambda: token["value"])

    asyncio.run(client.list_records("skills"))
    token["value"] = "abc"
    asyncio.run(client.list_records("skills"))

    assert seen == [None, "Bearer abc"]


def test_error_detail_becomes_server_message():
    client = _client(lambda request: httpx.Response(404, json={"detail": "Skill not found"}))

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(client.update_record("skills", 9, {"name": "x"}))

    assert exc_info.value.status_code == 404
    assert exc_info.value.server_message == "Skill not found"


def test_validation_errors_are_joined():
    body = {"detail": [{"msg": "field required"}, {"msg": "value too large"}]}
    client = _client(lambda request: httpx.Response(422, json=body))

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(client.create_record("skills", {}))

    assert exc_info.value.server_message == "field required; value too large"


def test_network_error_has_no_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_client(handler).get_about())

    assert exc_info.value.status_code is None
    assert exc_info.value.timed_out is False


def test_upload_reports_progress_and_sends_multipart():
    received = {}

    def handler(request):
        received["content_type"] = request.headers["Content-Type"]
        received["body"] = request.content
        return httpx.Response(201, json={"reports": [{"id": 1}]})

    progress = []
    data = b"x" * (UPLOAD_CHUNK_SIZE * 2 + 10)

    reports = asyncio.run(
        _client(handler).upload_report_files(
            "certificates",
            3,
            [("big.pdf", data, "application/pdf")],
            on_progress=lambda sent, total: progress.append((sent, total)),
        )
    )

    assert reports == [{"id": 1}]
    assert received["content_type"].startswith("multipart/form-data; boundary=")
    assert b'name="files"; filename="big.pdf"' in received["body"]
    total = len(received["body"])
    assert len(progress) == 3
    assert progress[-1] == (total, total)
    assert [sent for sent, _ in progress] == sorted(sent for sent, _ in progress)
