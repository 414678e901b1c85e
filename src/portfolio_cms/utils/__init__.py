"""Utility functions and helpers"""

from portfolio_cms.utils.concurrency import Settled, settle_all

__all__ = [
    "Settled",
    "settle_all",
]
