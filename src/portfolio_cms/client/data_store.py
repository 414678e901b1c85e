"""Client-side content store with optimistic mutations.

``ContentStore`` holds the about record, the site configuration and the
projects, certificates and skills collections. Each mutation is applied
locally before the server call and reverted when the server rejects it, so a
UI can render the change immediately. Operations return an ``Outcome`` and never raise.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import uuid4

from portfolio_cms.client.api_client import ApiError, PortfolioApiClient

logger = logging.getLogger(__name__)

COLLECTION_KINDS = ("projects", "certificates", "skills")
# Collections whose visibility has its own endpoint
VISIBILITY_KINDS = ("projects", "certificates")

AUTH_EXPIRED_MESSAGE = "Authentication expired. Please login again."
TIMEOUT_MESSAGE = "Request timed out. Please try again."


class MutationState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass
class Mutation:
    """One optimistic change and the state it replaced."""

    kind: str
    action: str
    target_id: Any
    snapshot: Any
    state: MutationState = MutationState.PENDING
    error: str | None = None


@dataclass(frozen=True)
class Outcome:
    success: bool
    message: str | None = None
    data: Any = field(default=None, compare=False)


def _error_message(exc: Exception, fallback: str) -> str:
    if isinstance(exc, ApiError):
        if exc.status_code == 401:
            return AUTH_EXPIRED_MESSAGE
        if exc.timed_out:
            return TIMEOUT_MESSAGE
        if exc.server_message:
            return exc.server_message
    return fallback


class ContentStore:
    """Optimistic cache of the portfolio content."""

    def __init__(self, api: PortfolioApiClient, *, history_size: int = 100) -> None:
        self._api = api
        self.about: dict | None = None
        self.configuration: dict | None = None
        self._collections: dict[str, list[dict]] = {kind: [] for kind in COLLECTION_KINDS}
        self.history: deque[Mutation] = deque(maxlen=history_size)
        self.loading = False
        self.error: str | None = None

    @property
    def projects(self) -> list[dict]:
        return self._collections["projects"]

    @property
    def certificates(self) -> list[dict]:
        return self._collections["certificates"]

    @property
    def skills(self) -> list[dict]:
        return self._collections["skills"]

    def records(self, kind: str) -> list[dict]:
        if kind not in self._collections:
            raise ValueError(f"Unknown content collection '{kind}'")
        return self._collections[kind]

    def pending(self) -> list[Mutation]:
        return [m for m in self.history if m.state is MutationState.PENDING]

    def _begin(self, kind: str, action: str, target_id: Any, snapshot: Any) -> Mutation:
        mutation = Mutation(kind=kind, action=action, target_id=target_id, snapshot=snapshot)
        self.history.append(mutation)
        return mutation

    def _confirm(self, mutation: Mutation, data: Any = None) -> Outcome:
        mutation.state = MutationState.CONFIRMED
        return Outcome(True, data=data)

    def _roll_back(self, mutation: Mutation, exc: Exception, fallback: str) -> Outcome:
        if not isinstance(exc, ApiError):
            logger.exception("Unexpected error during %s on %s", mutation.action, mutation.kind)
        message = _error_message(exc, fallback)
        mutation.state = MutationState.ROLLED_BACK
        mutation.error = message
        logger.warning(
            "Rolled back %s of %s %s: %s",
            mutation.action,
            mutation.kind,
            mutation.target_id,
            message,
        )
        return Outcome(False, message)

    def _replace(self, kind: str, record_id: Any, record: dict) -> None:
        records = self.records(kind)
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                records[index] = record
                return
        records.append(record)

    async def refresh(self) -> Outcome:
        """Reload everything; on any failure the current state is kept."""
        self.loading = True
        try:
            about, configuration, *collections = await asyncio.gather(
                self._api.get_about(),
                self._api.get_configuration(),
                *(self._api.list_records(kind) for kind in COLLECTION_KINDS),
            )
        except Exception as exc:
            if not isinstance(exc, ApiError):
                logger.exception("Unexpected error while loading content")
            self.error = _error_message(exc, "Failed to load content")
            logger.warning("Content refresh failed: %s", self.error)
            return Outcome(False, self.error)
        finally:
            self.loading = False

        self.about = about
        self.configuration = configuration
        for kind, records in zip(COLLECTION_KINDS, collections, strict=True):
            self._collections[kind] = records
        self.error = None
        return Outcome(True)

    async def refresh_collection(self, kind: str) -> Outcome:
        """Reload a single collection."""
        try:
            records = await self._api.list_records(kind)
        except Exception as exc:
            message = _error_message(exc, f"Failed to load {kind}")
            logger.warning("Refreshing %s failed: %s", kind, message)
            return Outcome(False, message)
        self._collections[kind] = records
        return Outcome(True)

    async def create(self, kind: str, data: dict[str, Any]) -> Outcome:
        """Insert a temporary record, then swap in the server's record."""
        records = self.records(kind)
        temp_id = f"temp_{uuid4().hex}"
        mutation = self._begin(kind, "create", temp_id, None)
        records.append({**data, "id": temp_id})

        try:
            created = await self._api.create_record(kind, data)
        except Exception as exc:
            self._collections[kind] = [r for r in self.records(kind) if r.get("id") != temp_id]
            return self._roll_back(mutation, exc, "Creation failed")

        self._replace(kind, temp_id, created)
        mutation.target_id = created.get("id", temp_id)
        return self._confirm(mutation, created)

    async def update(self, kind: str, record_id: Any, patch: dict[str, Any]) -> Outcome:
        """Merge ``patch`` into a record, restoring the collection on failure."""
        snapshot = copy.deepcopy(self.records(kind))
        mutation = self._begin(kind, "update", record_id, snapshot)
        self._collections[kind] = [
            {**r, **patch} if r.get("id") == record_id else r for r in self.records(kind)
        ]

        try:
            if kind in VISIBILITY_KINDS and set(patch) == {"visible"}:
                updated = await self._api.set_visibility(kind, record_id, patch["visible"])
            else:
                updated = await self._api.update_record(kind, record_id, patch)
        except Exception as exc:
            self._collections[kind] = mutation.snapshot
            return self._roll_back(mutation, exc, "Update failed")

        self._replace(kind, record_id, updated)
        return self._confirm(mutation, updated)

    async def delete(self, kind: str, record_id: Any) -> Outcome:
        """Remove a record, re-appending it if the server refuses."""
        removed = [r for r in self.records(kind) if r.get("id") == record_id]
        mutation = self._begin(kind, "delete", record_id, copy.deepcopy(removed))
        self._collections[kind] = [r for r in self.records(kind) if r.get("id") != record_id]

        try:
            await self._api.delete_record(kind, record_id)
        except Exception as exc:
            self.records(kind).extend(mutation.snapshot)
            return self._roll_back(mutation, exc, "Deletion failed")

        return self._confirm(mutation)

    async def delete_many(self, kind: str, record_ids: list[Any]) -> Outcome:
        """Remove several records with one bulk request."""
        ids = set(record_ids)
        removed = [r for r in self.records(kind) if r.get("id") in ids]
        mutation = self._begin(kind, "delete_many", list(record_ids), copy.deepcopy(removed))
        self._collections[kind] = [r for r in self.records(kind) if r.get("id") not in ids]

        try:
            deleted = await self._api.delete_records(kind, record_ids)
        except Exception as exc:
            self.records(kind).extend(mutation.snapshot)
            return self._roll_back(mutation, exc, "Deletion failed")

        return self._confirm(mutation, deleted)

    async def update_about(self, patch: dict[str, Any]) -> Outcome:
        mutation = self._begin("about", "update", None, copy.deepcopy(self.about))
        self.about = {**(self.about or {}), **patch}

        try:
            updated = await self._api.update_about(patch)
        except Exception as exc:
            self.about = mutation.snapshot
            return self._roll_back(mutation, exc, "Update failed")

        self.about = updated
        return self._confirm(mutation, updated)

    async def update_configuration(self, sections: dict[str, Any]) -> Outcome:
        """Merge ``sections`` into the configuration the way the server does."""
        mutation = self._begin("configuration", "update", None, copy.deepcopy(self.configuration))
        merged = dict(self.configuration or {})
        for section, value in sections.items():
            current = merged.get(section)
            if isinstance(value, dict) and isinstance(current, dict):
                merged[section] = {**current, **value}
            else:
                merged[section] = value
        self.configuration = merged

        try:
            updated = await self._api.update_configuration(sections)
        except Exception as exc:
            self.configuration = mutation.snapshot
            return self._roll_back(mutation, exc, "Update failed")

        self.configuration = updated
        return self._confirm(mutation, updated)

    async def reset_configuration(self) -> Outcome:
        """Restore the defaults; the local copy only changes once the server agrees."""
        mutation = self._begin("configuration", "reset", None, copy.deepcopy(self.configuration))
        try:
            configuration = await self._api.reset_configuration()
        except Exception as exc:
            return self._roll_back(mutation, exc, "Reset failed")

        self.configuration = configuration
        return self._confirm(mutation, configuration)
