# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Summary Store Port.

Synopsis:
    Storage behind the dashboard result cache. Enables swapping the
    process-local store for Redis without touching the cache policy.

Layer:
    application/interfaces
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Protocol

from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary


class CacheKey(NamedTuple):
    """Composite cache key; ``year`` is ``None`` for all-time views."""

    user_id: int
    year: int | None
    period: str


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Cached summary with its write time and expiry (epoch seconds)."""

    key: CacheKey
    data: DashboardSummary
    timestamp: float
    expiry: float


class SummaryStore(Protocol):
    """Keyed storage of cache entries.

    Implementations never mutate a stored entry in place: ``put`` overwrites
    the whole entry (last write wins).
    """

    async def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the stored entry for ``key``, expired or not, if any."""
        ...

    async def put(self, entry: CacheEntry) -> None:
        """Store ``entry`` under its key."""
        ...

    async def delete_user(self, user_id: int) -> int:
        """Delete every entry owned by ``user_id`` and return how many were removed."""
        ...
