# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dashboard Result Cache (Application Service).

Synopsis:
    Short-TTL memoization of dashboard summaries keyed by
    ``(user_id, year, period)``. The cache policy (hit, expiry, forced
    refresh, per-user invalidation) lives here; storage is delegated to a
    :class:`SummaryStore` so the same policy runs over process memory or Redis.

Semantics:
    * Hit: ``now < expiry`` and no forced refresh. The stored summary is
      returned unchanged and ``compute`` is not called.
    * Miss, expired entry or forced refresh: ``compute`` runs, its result is
      stored with ``expiry = now + ttl`` and returned.
    * Writes are last-write-wins; entries are never partially mutated.

Layer:
    application/services
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Final

from fiscal_dashboard_api.application.interfaces.summary_store import (
    CacheEntry,
    CacheKey,
    SummaryStore,
)
from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger
from fiscal_dashboard_api.infrastructure.observability.metrics import (
    get_dashboard_cache_operations_total,
)

__all__ = ["CacheLookup", "DashboardResultCache", "DEFAULT_TTL_S"]

#: Default summary time-to-live (seconds).
DEFAULT_TTL_S: Final[int] = 30

#: Event names logged when a summary is served or recomputed.
CACHED_EVENT: Final[str] = "dashboard-stats-cached"
CALCULATED_EVENT: Final[str] = "dashboard-stats-calculated"

logger = get_json_logger(__name__)


@dataclass(frozen=True, slots=True)
class CacheLookup:
    """Summary returned by :meth:`DashboardResultCache.get_or_compute`."""

    data: DashboardSummary
    hit: bool


class DashboardResultCache:
    """Per-(user, year, period) cache of dashboard summaries.

    Args:
        store: Storage for cache entries.
        ttl_s: Entry time-to-live in seconds.
        clock: Epoch-seconds clock; injectable for tests.
    """

    def __init__(
        self,
        store: SummaryStore,
        *,
        ttl_s: int = DEFAULT_TTL_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be > 0")
        self._store = store
        self._ttl_s = ttl_s
        self._clock = clock

    @property
    def ttl_s(self) -> int:
        """Configured time-to-live in seconds."""
        return self._ttl_s

    async def get_or_compute(
        self,
        user_id: int,
        year: int | None,
        period: str,
        *,
        force_refresh: bool,
        compute: Callable[[], Awaitable[DashboardSummary]],
    ) -> CacheLookup:
        """Return the cached summary or compute, store and return a fresh one.

        Args:
            user_id: Dashboard owner.
            year: Year filter, ``None`` for all-time.
            period: Normalized period selector.
            force_refresh: Bypass any cached entry.
            compute: Coroutine factory producing a fresh summary.

        Returns:
            CacheLookup with the summary and whether it came from the cache.
        """
        key = CacheKey(user_id=user_id, year=year, period=period)
        counter = get_dashboard_cache_operations_total()

        if not force_refresh:
            entry = await self._store.get(key)
            if entry is not None and self._clock() < entry.expiry:
                counter.labels(operation="get_or_compute", hit="true").inc()
                logger.info(
                    CACHED_EVENT,
                    extra={"user_id": user_id, "year": year, "period": period},
                )
                return CacheLookup(data=entry.data, hit=True)

        counter.labels(operation="get_or_compute", hit="false").inc()
        data = await compute()
        now = self._clock()
        await self._store.put(CacheEntry(key=key, data=data, timestamp=now, expiry=now + self._ttl_s))
        logger.info(
            CALCULATED_EVENT,
            extra={
                "user_id": user_id,
                "year": year,
                "period": period,
                "forced": force_refresh,
            },
        )
        return CacheLookup(data=data, hit=False)

    async def clear_user(self, user_id: int) -> int:
        """Drop every cached summary of ``user_id``.

        Returns:
            Number of entries removed.
        """
        deleted = await self._store.delete_user(user_id)
        get_dashboard_cache_operations_total().labels(operation="clear_user", hit="n/a").inc()
        logger.info("dashboard_cache_cleared", extra={"user_id": user_id, "deleted": deleted})
        return deleted
