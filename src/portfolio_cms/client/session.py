"""Admin session with an inactivity timeout.

``SessionManager`` tracks the logged-in admin and when they were last
active. After ``timeout - warning_window`` seconds without activity it enters
the warning state once; after ``timeout`` seconds it logs out. The manager is
clock driven: ``check()`` evaluates the deadlines, and ``run()`` calls it
periodically on the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from portfolio_cms.client.api_client import ApiError, PortfolioApiClient
from portfolio_cms.client.data_store import Outcome
from portfolio_cms.client.token_store import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_TIMEOUT = 30 * 60
DEFAULT_WARNING_WINDOW = 5 * 60

# User interactions that count as activity
ACTIVITY_EVENTS = frozenset({"mousedown", "mousemove", "keypress", "scroll", "touchstart", "click"})


class SessionState(str, Enum):
    LOGGED_OUT = "logged_out"
    ACTIVE = "active"
    WARNING = "warning"


class SessionManager:
    """Login state plus the inactivity timer.

    Args:
        api: Client used for login and identity checks.
        token_store: Where the bearer token is kept; the API client should
            read its token from the same store.
        timeout: Seconds of inactivity before logout.
        warning_window: Seconds before logout at which the warning starts.
        clock: Monotonic clock in seconds.
        on_warning: Called with the seconds left when the warning starts.
        on_logout: Called with the reason whenever a session ends.
    """

    def __init__(
        self,
        api: PortfolioApiClient,
        token_store: TokenStore,
        *,
        timeout: float = DEFAULT_INACTIVITY_TIMEOUT,
        warning_window: float = DEFAULT_WARNING_WINDOW,
        clock: Callable[[], float] = time.monotonic,
        on_warning: Callable[[float], None] | None = None,
        on_logout: Callable[[str], None] | None = None,
    ) -> None:
        if not 0 < warning_window < timeout:
            raise ValueError("warning_window must be positive and shorter than timeout")
        self._api = api
        self._tokens = token_store
        self.timeout = timeout
        self.warning_window = warning_window
        self._clock = clock
        self._on_warning = on_warning
        self._on_logout = on_logout
        self.state = SessionState.LOGGED_OUT
        self.user: dict | None = None
        self._last_activity: float | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is not SessionState.LOGGED_OUT

    @property
    def show_warning(self) -> bool:
        return self.state is SessionState.WARNING

    def seconds_remaining(self) -> float | None:
        """Seconds until the inactivity logout, or None when logged out."""
        if self._last_activity is None:
            return None
        return max(0.0, self.timeout - (self._clock() - self._last_activity))

    async def login(self, email: str, password: str) -> Outcome:
        try:
            data = await self._api.login(email, password)
        except ApiError as exc:
            logger.info("Login failed for %s: %s", email, exc.message)
            return Outcome(False, exc.server_message or "Login failed")

        self._tokens.save(data["token"])
        self.user = data["user"]
        self._reset_timer()
        logger.info("Logged in as %s", self.user.get("email"))
        return Outcome(True, data=self.user)

    async def restore(self) -> bool:
        """Resume a session from a stored token.

        A rejected token is cleared; a network failure leaves the token in
        place for a later attempt.
        """
        if not self._tokens.load():
            return False
        try:
            user = await self._api.me()
        except ApiError as exc:
            if exc.status_code == 401:
                self._end("token rejected")
            else:
                logger.warning("Could not restore session: %s", exc.message)
            return False

        self.user = user
        self._reset_timer()
        return True

    async def verify_identity(self) -> bool:
        """Re-check the token with the server; a 401 ends the session."""
        if not self.is_authenticated:
            return False
        try:
            self.user = await self._api.me()
        except ApiError as exc:
            if exc.status_code == 401:
                self._end("token rejected")
                return False
            logger.warning("Identity check failed: %s", exc.message)
        return self.is_authenticated

    def record_activity(self, event: str) -> None:
        if event in ACTIVITY_EVENTS and self.is_authenticated:
            self._reset_timer()

    def dismiss_warning(self) -> None:
        if self.state is SessionState.WARNING:
            logger.info("Inactivity warning dismissed; session extended")
            self._reset_timer()

    def reset_inactivity_for_upload(self, *_progress: int) -> None:
        """Keep the session alive while an upload reports progress.

        Accepts and ignores the ``(sent, total)`` arguments so it can be
        passed directly as an upload ``on_progress`` callback.
        """
        if self.is_authenticated:
            self._reset_timer()

    def check(self) -> SessionState:
        """Apply the inactivity deadlines against the clock."""
        if not self.is_authenticated:
            return self.state
        idle = self._clock() - self._last_activity
        if idle >= self.timeout:
            logger.info("Inactivity timeout reached; logging out")
            self._end("inactivity")
        elif idle >= self.timeout - self.warning_window and self.state is SessionState.ACTIVE:
            self.state = SessionState.WARNING
            logger.info("Inactivity warning: %.0f seconds until logout", self.timeout - idle)
            if self._on_warning is not None:
                self._on_warning(self.timeout - idle)
        return self.state

    async def run(self, poll_interval: float = 1.0) -> None:
        """Call ``check()`` every ``poll_interval`` seconds until logged out."""
        while self.check() is not SessionState.LOGGED_OUT:
            await asyncio.sleep(poll_interval)

    def close(self) -> None:
        """End the session because the client is shutting down."""
        self._end("closed")

    def logout(self) -> None:
        self._end("logout")

    def _reset_timer(self) -> None:
        self._last_activity = self._clock()
        self.state = SessionState.ACTIVE

    def _end(self, reason: str) -> None:
        was_authenticated = self.is_authenticated
        self._tokens.clear()
        self.user = None
        self.state = SessionState.LOGGED_OUT
        self._last_activity = None
        if was_authenticated:
            logger.info("Session ended: %s", reason)
            if self._on_logout is not None:
                self._on_logout(reason)
