from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import portfolio_cms.data.db as app_db
from portfolio_cms.api.dependencies import get_file_service
from portfolio_cms.api.main import app
from portfolio_cms.data.db import init_db
from portfolio_cms.data.models import Base
from portfolio_cms.models.upload import IncomingFile
from portfolio_cms.services.auth import authenticate_user, create_user, issue_token
from portfolio_cms.services.file_service import FileService


class FakeMediaStore:
    """In-memory stand-in for Cloudinary.

    Uploads whose original filename stem is listed in ``fail_stems`` raise;
    ``destroy_error`` makes every deletion raise.
    """

    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.destroyed: list[tuple[str, str]] = []
        self.stored: set[str] = set()
        self.fail_stems: set[str] = set()
        self.destroy_error: Exception | None = None
        self.upload_delay = 0.0

    def upload(self, data: bytes, options: dict[str, Any]) -> dict[str, Any]:
        if self.upload_delay:
            time.sleep(self.upload_delay)
        stem = options["public_id"].rsplit("_", 2)[0]
        if stem in self.fail_stems:
            raise RuntimeError("media store unavailable")
        public_id = f"{options['folder']}/{options['public_id']}"
        self.uploads.append({"public_id": public_id, "size": len(data), **options})
        self.stored.add(public_id)
        response = {
            "secure_url": f"https://res.example.com/{public_id}",
            "public_id": public_id,
            "resource_type": options["resource_type"],
            "format": "bin",
        }
        if options["resource_type"] == "image":
            response.update(width=640, height=480)
        return response

    def destroy(self, public_id: str, resource_type: str) -> dict[str, Any]:
        self.destroyed.append((public_id, resource_type))
        if self.destroy_error is not None:
            raise self.destroy_error
        if public_id in self.stored:
            self.stored.discard(public_id)
            return {"result": "ok"}
        return {"result": "not found"}


def _make_file(name: str, mime_type: str = "application/pdf", size: int = 1024) -> IncomingFile:
    return IncomingFile(original_name=name, mime_type=mime_type, data=b"x" * size)


@pytest.fixture
def make_file():
    """Factory for in-memory uploads of a given MIME type and size."""
    return _make_file


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def file_service(media_store: FakeMediaStore) -> FileService:
    return FileService(media_store, max_file_size=50 * 1024 * 1024)


@pytest.fixture
def tmp_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Point the session factory at a fresh SQLite database."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(app_db, "_engine", engine)
    monkeypatch.setattr(
        app_db, "_SessionLocal", sessionmaker(bind=engine, expire_on_commit=False)
    )
    yield
    engine.dispose()


@pytest.fixture
def api_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Use a temporary SQLite DB for API tests."""
    db_path = tmp_path / "api.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    monkeypatch.setenv("PORTFOLIO_SECRET_KEY", "test-secret")
    app_db._engine = None
    app_db._SessionLocal = None
    init_db()
    yield
    # Dispose engine to release connections
    if app_db._engine is not None:
        app_db._engine.dispose()
        app_db._engine = None
        app_db._SessionLocal = None


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically add api_db fixture to tests in API test files."""
    for item in items:
        test_file_path = Path(str(item.fspath))
        if "api" in test_file_path.stem.lower():
            item.add_marker(pytest.mark.usefixtures("api_db"))


@pytest.fixture
def client(api_db: None, file_service: FileService) -> TestClient:
    """Test client whose uploads go to the in-memory media store."""
    app.dependency_overrides[get_file_service] = lambda: file_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(api_db: None) -> dict:
    """Create the admin account and return its public data."""
    create_user("admin@example.com", "s3cret-pass", "Admin")
    user, _ = authenticate_user("admin@example.com", "s3cret-pass")
    return user


@pytest.fixture
def auth_headers(admin_user: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(admin_user['id'])}"}
