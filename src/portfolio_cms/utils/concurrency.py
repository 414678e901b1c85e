"""Join-all helper for fan-out/fan-in batches.

``settle_all`` runs every awaitable concurrently and waits for all of them.
A failing item is captured in its ``Settled`` slot instead of cancelling its
siblings, so callers handle partial failure as data rather than by catching
exceptions.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class Settled(Generic[T]):
    """Result of one awaitable: either ``value`` or ``error`` is meaningful."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(awaitables: Iterable[Awaitable[T]]) -> list[Settled[T]]:
    """Await every item concurrently and report each outcome in input order."""
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    settled: list[Settled[T]] = []
    for result in results:
        if isinstance(result, BaseException):
            settled.append(Settled(error=result))
        else:
            settled.append(Settled(value=result))
    return settled
