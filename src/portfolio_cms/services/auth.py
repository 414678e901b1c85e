"""Authentication for the admin API.

Admin accounts live in the users table with salted PBKDF2 password hashes.
A successful login returns an HS256 JWT whose ``sub`` claim is the user ID,
signed with ``PORTFOLIO_SECRET_KEY`` and expiring after the configured TTL.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import secrets
import time

from jose import JWTError, jwt

from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16
DEFAULT_TOKEN_TTL_SECONDS = 24 * 60 * 60
TOKEN_ALGORITHM = "HS256"

_generated_secret: str | None = None


def _hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the given password.

    The result is stored as ``<salt_hex>:<hash_hex>``.
    """
    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}:{derived.hex()}"


def _verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored ``salt:hash`` string."""
    try:
        salt_hex, hash_hex = stored_hash.split(":", 1)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    candidate = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(candidate, expected)


def get_secret_key() -> str:
    """Return the token signing key.

    Falls back to a per-process random key, which invalidates every issued
    token on restart.
    """
    global _generated_secret
    env_key = os.getenv("PORTFOLIO_SECRET_KEY")
    if env_key:
        return env_key
    if _generated_secret is None:
        logger.warning("PORTFOLIO_SECRET_KEY is not set; using a temporary signing key")
        _generated_secret = secrets.token_hex(32)
    return _generated_secret


def get_token_ttl() -> int:
    """Return the token lifetime in seconds."""
    env_value = os.getenv("PORTFOLIO_TOKEN_TTL_SECONDS")
    if env_value and env_value.isdigit():
        return int(env_value)
    return DEFAULT_TOKEN_TTL_SECONDS


def user_to_dict(user: User) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}


def issue_token(user_id: int, *, now: float | None = None) -> str:
    """Return a signed bearer token for ``user_id``."""
    issued_at = int(now if now is not None else time.time())
    claims = {"sub": str(user_id), "iat": issued_at, "exp": issued_at + get_token_ttl()}
    return jwt.encode(claims, get_secret_key(), algorithm=TOKEN_ALGORITHM)


def verify_token(token: str) -> int | None:
    """Return the user ID carried by a valid, unexpired token, else None."""
    try:
        claims = jwt.decode(token, get_secret_key(), algorithms=[TOKEN_ALGORITHM])
        return int(claims["sub"])
    except (JWTError, KeyError, ValueError):
        return None


def create_user(email: str, password: str, name: str = "") -> tuple[bool, str | None]:
    """Create a new admin account.

    Returns:
        Tuple of (success flag, error message). On success, error is None.
    """
    email_clean = email.strip().lower()
    if not email_clean:
        return False, "Email cannot be empty."
    if not password:
        return False, "Password cannot be empty."

    try:
        with get_session() as session:
            existing = session.query(User).filter(User.email == email_clean).first()
            if existing is not None:
                return False, "Email already registered."

            user = User(
                email=email_clean, name=name.strip(), password_hash=_hash_password(password)
            )
            session.add(user)
        return True, None
    except Exception as exc:
        return False, f"Failed to create user: {exc}"


def authenticate_user(email: str, password: str) -> tuple[dict | None, str | None]:
    """Authenticate by email and password.

    Returns:
        Tuple of (user data, error message). On success, error is None.
    """
    email_clean = email.strip().lower()
    if not email_clean or not password:
        return None, "Email and password are required."

    try:
        with get_session() as session:
            user = session.query(User).filter(User.email == email_clean).first()
            if user is None or not _verify_password(password, user.password_hash):
                return None, "Invalid email or password."
            return user_to_dict(user), None
    except Exception as exc:
        logger.exception("Authentication failed for %s", email_clean)
        return None, f"Authentication failed: {exc}"


def get_user(user_id: int) -> dict | None:
    """Return a user's public data, or None if the account does not exist."""
    with get_session() as session:
        user = session.get(User, user_id)
        return user_to_dict(user) if user is not None else None
