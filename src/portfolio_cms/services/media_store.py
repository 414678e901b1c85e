"""Remote media store used by ``FileService``.

``MediaStore`` is the narrow surface FileService needs from a media host.
``CloudinaryStore`` implements it with the Cloudinary SDK, configured from
the ``CLOUDINARY_*`` environment variables.
"""

from __future__ import annotations

import io
import logging
import os
from typing import Any, Protocol

import cloudinary
import cloudinary.uploader

logger = logging.getLogger(__name__)

_CLOUDINARY_ENV_VARS = {
    "cloud_name": "CLOUDINARY_CLOUD_NAME",
    "api_key": "CLOUDINARY_API_KEY",
    "api_secret": "CLOUDINARY_API_SECRET",
}


class MediaStore(Protocol):
    """Blocking media host client; FileService runs calls off the event loop."""

    def upload(self, data: bytes, options: dict[str, Any]) -> dict[str, Any]:
        """Store ``data`` and return the host's raw response."""
        ...

    def destroy(self, public_id: str, resource_type: str) -> dict[str, Any]:
        """Delete a stored file and return the host's raw response."""
        ...


def get_cloudinary_config() -> dict[str, str | None]:
    """Return Cloudinary credentials read from the environment."""
    return {key: os.getenv(env_var) for key, env_var in _CLOUDINARY_ENV_VARS.items()}


class CloudinaryStore:
    """``MediaStore`` backed by the Cloudinary upload API."""

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
    ) -> None:
        env_config = get_cloudinary_config()
        config = {
            "cloud_name": cloud_name or env_config["cloud_name"],
            "api_key": api_key or env_config["api_key"],
            "api_secret": api_secret or env_config["api_secret"],
        }
        missing = [_CLOUDINARY_ENV_VARS[key] for key, value in config.items() if not value]
        if missing:
            logger.warning(
                "Cloudinary is not fully configured (missing %s); uploads will fail",
                ", ".join(missing),
            )
        cloudinary.config(secure=True, **config)

    def upload(self, data: bytes, options: dict[str, Any]) -> dict[str, Any]:
        return cloudinary.uploader.upload(io.BytesIO(data), **options)

    def destroy(self, public_id: str, resource_type: str) -> dict[str, Any]:
        return cloudinary.uploader.destroy(public_id, resource_type=resource_type)
