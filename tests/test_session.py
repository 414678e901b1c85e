"""Tests for the admin session and its inactivity timer."""

from __future__ import annotations

import asyncio
import os

import httpx
import pytest

from portfolio_cms.client.api_client import PortfolioApiClient
from portfolio_cms.client.session import SessionManager, SessionState
from portfolio_cms.client.token_store import FileTokenStore, MemoryTokenStore

USER = {"id": 1, "email": "admin@example.com", "name": "Admin", "role": "admin"}


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class AuthBackend:
    def __init__(self) -> None:
        self.me_status = 200
        self.seen_tokens: list[str | None] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.seen_tokens.append(request.headers.get("Authorization"))
        if request.url.path == "/api/auth/login":
            if b"wrong" in request.content:
                return httpx.Response(401, json={"detail": "Invalid email or password."})
            return httpx.Response(200, json={"token": "tok-123", "user": USER})
        if request.url.path == "/api/auth/me":
            if self.me_status == 200:
                return httpx.Response(200, json={"user": USER})
            return httpx.Response(self.me_status, json={"detail": "nope"})
        return httpx.Response(404)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> AuthBackend:
    return AuthBackend()


@pytest.fixture
def tokens() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def session(backend, tokens, clock, events) -> SessionManager:
    api = PortfolioApiClient(
        "http://testserver",
        token_provider=tokens.load,
        transport=httpx.MockTransport(backend.handler),
    )
    return SessionManager(
        api,
        tokens,
        clock=clock,
        on_warning=lambda remaining: events.append(("warning", remaining)),
        on_logout=lambda reason: events.append(("logout", reason)),
    )


def _login(session: SessionManager) -> None:
    outcome = asyncio.run(session.login("admin@example.com", "s3cret"))
    assert outcome.success is True


def test_login_stores_token_and_user(session, tokens, backend):
    _login(session)

    assert session.state is SessionState.ACTIVE
    assert session.user == USER
    assert tokens.load() == "tok-123"
    asyncio.run(session.verify_identity())
    assert backend.seen_tokens[-1] == "Bearer tok-123"


def test_failed_login(session, tokens):
    outcome = asyncio.run(session.login("admin@example.com", "wrong"))
    assert outcome.success is False
    assert outcome.message == "Invalid email or password."
    assert session.state is SessionState.LOGGED_OUT
    assert tokens.load() is None


def test_warning_once_then_logout(session, clock, tokens, events):
    _login(session)

    clock.advance(24 * 60)
    assert session.check() is SessionState.ACTIVE
    clock.advance(60)
    assert session.check() is SessionState.WARNING
    clock.advance(60)
    assert session.check() is SessionState.WARNING
    assert events == [("warning", 300.0)]

    clock.advance(4 * 60)
    assert session.check() is SessionState.LOGGED_OUT
    assert session.user is None
    assert tokens.load() is None
    assert events[-1] == ("logout", "inactivity")


def test_activity_resets_timer(session, clock):
    _login(session)
    clock.advance(29 * 60)
    session.record_activity("keypress")
    clock.advance(29 * 60)
    assert session.check() is SessionState.ACTIVE


def test_non_qualifying_event_is_ignored(session, clock):
    _login(session)
    clock.advance(26 * 60)
    session.record_activity("focus")
    assert session.check() is SessionState.WARNING


def test_dismiss_warning_extends_session(session, clock):
    _login(session)
    clock.advance(26 * 60)
    session.check()

    session.dismiss_warning()

    assert session.state is SessionState.ACTIVE
    assert session.seconds_remaining() == 30 * 60


def test_upload_progress_keeps_session_alive(session, clock):
    _login(session)
    for _ in range(5):
        clock.advance(10 * 60)
        session.reset_inactivity_for_upload(512, 1024)
    assert session.check() is SessionState.ACTIVE


def test_restore_with_valid_token(session, tokens):
    tokens.save("tok-123")
    assert asyncio.run(session.restore()) is True
    assert session.user == USER


def test_restore_with_rejected_token_clears_it(session, tokens, backend):
    tokens.save("stale")
    backend.me_status = 401
    assert asyncio.run(session.restore()) is False
    assert tokens.load() is None


def test_restore_network_error_keeps_token(session, tokens, backend):
    tokens.save("tok-123")
    backend.me_status = 503
    assert asyncio.run(session.restore()) is False
    assert session.state is SessionState.LOGGED_OUT
    assert tokens.load() == "tok-123"


def test_identity_check_logs_out_on_401(session, backend, events):
    _login(session)
    backend.me_status = 401
    assert asyncio.run(session.verify_identity()) is False
    assert session.state is SessionState.LOGGED_OUT
    assert events == [("logout", "token rejected")]


def test_logout_and_close_clear_everything(session, tokens, events):
    _login(session)
    session.logout()
    assert tokens.load() is None
    assert session.user is None
    session.close()
    assert events == [("logout", "logout")]


def test_run_stops_after_logout(session, tokens):
    clock = {"now": 0.0}
    session._clock = lambda: clock["now"]
    _login(session)

    async def advance() -> None:
        for _ in range(5):
            await asyncio.sleep(0)
            clock["now"] += 10 * 60

    async def main() -> None:
        await asyncio.gather(session.run(poll_interval=0), advance())

    asyncio.run(main())
    assert session.state is SessionState.LOGGED_OUT


def test_warning_window_must_fit_timeout(tokens):
    with pytest.raises(ValueError):
        SessionManager(None, tokens, timeout=60, warning_window=60)


def test_file_token_store(tmp_path, monkeypatch):
    monkeypatch.setenv("PORTFOLIO_TOKEN_FILE", str(tmp_path / "auth" / "token.json"))
    store = FileTokenStore()

    assert store.load() is None
    store.save("abc")
    assert FileTokenStore().load() == "abc"
    store.clear()
    assert store.load() is None


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
def test_file_token_store_is_private_to_the_user(tmp_path, monkeypatch):
    token_file = tmp_path / "token.json"
    token_file.write_text("{}", encoding="utf-8")
    token_file.chmod(0o644)
    monkeypatch.setenv("PORTFOLIO_TOKEN_FILE", str(token_file))
    opened_modes = []
    real_open = os.open

    def recording_open(path, flags, mode=0o777):
        opened_modes.append(mode)
        return real_open(path, flags, mode)

    monkeypatch.setattr(os, "open", recording_open)
    FileTokenStore().save("secret")

    assert opened_modes == [0o600]
    assert token_file.stat().st_mode & 0o777 == 0o600
    assert FileTokenStore().load() == "secret"
