"""Async REST client for the Portfolio CMS API.

Every failed call raises ``ApiError``: transport failures and timeouts as
well as non-2xx responses, whose ``detail`` becomes ``server_message``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT_SECONDS = 300.0
UPLOAD_TIMEOUT_SECONDS = 600.0
UPLOAD_CHUNK_SIZE = 64 * 1024

# (original_name, data, mime_type)
UploadItem = tuple[str, bytes, str]
ProgressCallback = Callable[[int, int], None]


def get_api_base_url() -> str:
    """Return the API base URL, honoring ``PORTFOLIO_API_BASE_URL``."""
    return os.getenv("PORTFOLIO_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")


class ApiError(Exception):
    """A failed API call."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        timed_out: bool = False,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out
        self.server_message = server_message


def _server_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    detail = body.get("detail") or body.get("error") or body.get("message")
    if isinstance(detail, list):
        # FastAPI request validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail if item)
    return detail if isinstance(detail, str) else None


class PortfolioApiClient:
    """Thin async wrapper over the REST surface of the API.

    Args:
        base_url: API origin; defaults to ``get_api_base_url()``.
        token_provider: Called before each request; a returned token is sent
            as ``Authorization: Bearer <token>``.
        transport: Optional httpx transport, used by tests.
        timeout: Default request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token_provider: Callable[[], str | None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url or get_api_base_url(),
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._authorize]},
        )

    async def __aenter__(self) -> PortfolioApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _authorize(self, request: httpx.Request) -> None:
        token = self._token_provider() if self._token_provider else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _send(self, request: httpx.Request) -> Any:
        try:
            response = await self._client.send(request)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", request.method, request.url.path)
            raise ApiError("Request timed out", timed_out=True) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
            raise ApiError(f"Network error: {exc}") from exc

        if response.is_error:
            server_message = _server_message(response)
            raise ApiError(
                server_message or f"Request failed with status {response.status_code}",
                response.status_code,
                server_message=server_message,
            )
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        return await self._send(self._client.build_request(method, path, **kwargs))

    async def _upload(
        self,
        path: str,
        files: Sequence[UploadItem],
        on_progress: ProgressCallback | None = None,
    ) -> Any:
        """POST ``files`` as multipart field ``files``, reporting bytes sent."""
        multipart = [("files", (name, data, mime_type)) for name, data, mime_type in files]
        encoded = self._client.build_request("POST", path, files=multipart)
        body = encoded.read()
        total = len(body)

        async def stream() -> AsyncIterator[bytes]:
            sent = 0
            for start in range(0, total, UPLOAD_CHUNK_SIZE):
                chunk = body[start : start + UPLOAD_CHUNK_SIZE]
                sent += len(chunk)
                yield chunk
                if on_progress is not None:
                    on_progress(sent, total)

        request = self._client.build_request(
            "POST",
            path,
            content=stream(),
            headers={
                "Content-Type": encoded.headers["Content-Type"],
                "Content-Length": str(total),
            },
            timeout=UPLOAD_TIMEOUT_SECONDS,
        )
        return await self._send(request)

    # Auth

    async def login(self, email: str, password: str) -> dict:
        return await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )

    async def me(self) -> dict:
        data = await self._request("GET", "/api/auth/me")
        return data["user"]

    # About

    async def get_about(self) -> dict:
        return await self._request("GET", "/api/about")

    async def update_about(self, patch: dict[str, Any]) -> dict:
        return await self._request("PUT", "/api/about", json=patch)

    async def get_configuration(self) -> dict:
        return await self._request("GET", "/api/configuration")

    async def update_configuration(self, sections: dict[str, Any]) -> dict:
        return await self._request("PUT", "/api/configuration", json=sections)

    async def reset_configuration(self) -> dict:
        return await self._request("POST", "/api/configuration/reset")

    # Collections

    async def list_records(self, kind: str) -> list[dict]:
        return await self._request("GET", f"/api/{kind}")

    async def create_record(self, kind: str, data: dict[str, Any]) -> dict:
        return await self._request("POST", f"/api/{kind}", json=data)

    async def update_record(self, kind: str, record_id: int, patch: dict[str, Any]) -> dict:
        return await self._request("PUT", f"/api/{kind}/{record_id}", json=patch)

    async def set_visibility(self, kind: str, record_id: int, visible: bool) -> dict:
        return await self._request(
            "PATCH", f"/api/{kind}/{record_id}/visibility", json={"visible": visible}
        )

    async def delete_record(self, kind: str, record_id: int) -> None:
        await self._request("DELETE", f"/api/{kind}/{record_id}")

    async def delete_records(self, kind: str, record_ids: Sequence[int]) -> int:
        data = await self._request("DELETE", f"/api/{kind}/bulk", json={"ids": list(record_ids)})
        return data["deleted"]

    # Reports

    async def list_reports(
        self,
        kind: str,
        parent_id: int,
        *,
        visible: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if visible is not None:
            params["visible"] = str(visible).lower()
        return await self._request("GET", f"/api/{kind}/{parent_id}/reports", params=params)

    async def create_report(self, kind: str, parent_id: int, data: dict[str, Any]) -> dict:
        return await self._request("POST", f"/api/{kind}/{parent_id}/reports", json=data)

    async def update_report(
        self, kind: str, parent_id: int, report_id: int, patch: dict[str, Any]
    ) -> dict:
        return await self._request(
            "PUT", f"/api/{kind}/{parent_id}/reports/{report_id}", json=patch
        )

    async def set_report_visibility(
        self, kind: str, parent_id: int, report_id: int, visible: bool
    ) -> dict:
        return await self._request(
            "PATCH",
            f"/api/{kind}/{parent_id}/reports/{report_id}/visibility",
            json={"visible": visible},
        )

    async def delete_report(self, kind: str, parent_id: int, report_id: int) -> None:
        await self._request("DELETE", f"/api/{kind}/{parent_id}/reports/{report_id}")

    async def report_statistics(self, kind: str, parent_id: int) -> dict:
        return await self._request("GET", f"/api/{kind}/{parent_id}/reports/statistics")

    async def upload_report_files(
        self,
        kind: str,
        parent_id: int,
        files: Sequence[UploadItem],
        on_progress: ProgressCallback | None = None,
    ) -> list[dict]:
        data = await self._upload(f"/api/{kind}/{parent_id}/reports/upload", files, on_progress)
        return data["reports"]

    # Certificates

    async def extract_certificate_details(self, name: str, data: bytes, mime_type: str) -> dict:
        result = await self._request(
            "POST", "/api/certificates/extract-details", files={"file": (name, data, mime_type)}
        )
        return result["extracted_data"]

    # Files

    async def list_files(self, kind: str, parent_id: int) -> list[dict]:
        data = await self._request("GET", f"/api/{kind}/{parent_id}/files")
        return data["files"]

    async def upload_files(
        self,
        kind: str,
        parent_id: int,
        files: Sequence[UploadItem],
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        return await self._upload(f"/api/{kind}/{parent_id}/files", files, on_progress)

    async def delete_file(self, kind: str, parent_id: int, file_id: int) -> None:
        await self._request("DELETE", f"/api/{kind}/{parent_id}/files/{file_id}")

    async def set_primary_file(self, kind: str, parent_id: int, file_id: int) -> list[dict]:
        data = await self._request("PATCH", f"/api/{kind}/{parent_id}/files/{file_id}/primary")
        return data["files"]
