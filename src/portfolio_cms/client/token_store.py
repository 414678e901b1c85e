"""Storage for the client's bearer token."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = Path.home() / ".portfolio_cms" / "token.json"
_TOKEN_FILE_MODE = 0o600


def get_token_file() -> Path:
    """Return the token file path, honoring ``PORTFOLIO_TOKEN_FILE``."""
    env_path = os.getenv("PORTFOLIO_TOKEN_FILE")
    return Path(env_path).expanduser() if env_path else DEFAULT_TOKEN_FILE


class TokenStore(Protocol):
    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process only."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Persists the token as JSON so a session survives restarts."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_token_file()

    def load(self) -> str | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        """Write the token to a file only the current user can read."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _TOKEN_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            # An existing file keeps its old mode through os.open
            os.chmod(self.path, _TOKEN_FILE_MODE)
            json.dump({"token": token}, handle)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
