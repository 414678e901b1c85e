"""Tests for the all-settled batch helper."""

from __future__ import annotations

import asyncio

from portfolio_cms.utils import settle_all


async def _value(value: int, delay: float = 0.0) -> int:
    await asyncio.sleep(delay)
    return value


async def _fail(message: str) -> int:
    raise RuntimeError(message)


def test_settle_all_preserves_input_order():
    results = asyncio.run(settle_all([_value(1, 0.02), _value(2), _value(3, 0.01)]))
    assert [r.value for r in results] == [1, 2, 3]
    assert all(r.ok for r in results)


def test_failure_does_not_cancel_siblings():
    results = asyncio.run(settle_all([_value(1, 0.01), _fail("boom"), _value(3, 0.02)]))

    assert results[0].ok and results[0].value == 1
    assert not results[1].ok
    assert str(results[1].error) == "boom"
    assert results[2].ok and results[2].value == 3


def test_settle_all_with_no_items():
    assert asyncio.run(settle_all([])) == []
