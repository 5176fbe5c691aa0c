# src/fiscal_dashboard_api/infrastructure/caching/summary_store.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dashboard summary stores.

Synopsis:
    Two implementations of the application ``SummaryStore`` port:

    * :class:`InMemorySummaryStore`: process-local dict guarded by an
      ``asyncio.Lock``. Default backend; needs no infrastructure.
    * :class:`RedisSummaryStore`: shared JSON entries on the Redis client
      from ``infrastructure/caching/redis_client.py``. Entries carry a Redis
      TTL slightly above the logical expiry so stale keys clean themselves up.

Key policy:
    ``{namespace}:{user_id}:{year|all}:{period}``, e.g.
    ``fiscal:dashboard:v1:42:2024:q1``.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import asyncio
import json
import math
from datetime import date
from decimal import Decimal
from typing import Any

from fiscal_dashboard_api.application.interfaces.summary_store import CacheEntry, CacheKey
from fiscal_dashboard_api.domain.entities.dashboard_summary import (
    COUNT_FIELDS,
    MONEY_FIELDS,
    DashboardSummary,
)
from fiscal_dashboard_api.infrastructure.caching.redis_client import RedisClient
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

__all__ = [
    "InMemorySummaryStore",
    "RedisSummaryStore",
    "summary_to_json",
    "summary_from_json",
]

logger = get_json_logger(__name__)

DEFAULT_NAMESPACE = "fiscal:dashboard:v1"


def summary_to_json(summary: DashboardSummary) -> dict[str, Any]:
    """Serialize a summary to JSON-safe primitives (money as strings)."""
    payload: dict[str, Any] = {name: str(getattr(summary, name)) for name in MONEY_FIELDS}
    payload.update({name: getattr(summary, name) for name in COUNT_FIELDS})
    payload["last_quote_date"] = (
        summary.last_quote_date.isoformat() if summary.last_quote_date else None
    )
    payload["year_options"] = list(summary.year_options)
    return payload


def summary_from_json(payload: dict[str, Any]) -> DashboardSummary:
    """Inverse of :func:`summary_to_json`; missing fields take their defaults."""
    kwargs: dict[str, Any] = {
        name: Decimal(payload[name]) for name in MONEY_FIELDS if name in payload
    }
    kwargs.update({name: int(payload[name]) for name in COUNT_FIELDS if name in payload})
    raw_date = payload.get("last_quote_date")
    kwargs["last_quote_date"] = date.fromisoformat(raw_date) if raw_date else None
    kwargs["year_options"] = tuple(int(y) for y in payload.get("year_options") or ())
    return DashboardSummary(**kwargs)


class InMemorySummaryStore:
    """Process-local summary store.

    Every ``put`` evicts entries already expired at the new entry's write
    time, so the map holds at most the keys written within one TTL.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: CacheKey) -> CacheEntry | None:
        async with self._lock:
            return self._entries.get(key)

    async def put(self, entry: CacheEntry) -> None:
        async with self._lock:
            expired = [k for k, e in self._entries.items() if e.expiry <= entry.timestamp]
            for k in expired:
                del self._entries[k]
            self._entries[entry.key] = entry
            if expired:
                logger.debug("dashboard_cache_pruned", extra={"evicted": len(expired)})

    async def delete_user(self, user_id: int) -> int:
        async with self._lock:
            doomed = [k for k in self._entries if k.user_id == user_id]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def __len__(self) -> int:
        return len(self._entries)


class RedisSummaryStore:
    """Redis-backed summary store.

    Args:
        client: Async Redis client (``decode_responses=True``).
        namespace: Key prefix owning the dashboard cache.
    """

    def __init__(self, client: RedisClient, *, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._redis = client
        self._ns = namespace.rstrip(":")

    def _key(self, key: CacheKey) -> str:
        year = "all" if key.year is None else str(key.year)
        return f"{self._ns}:{key.user_id}:{year}:{key.period}"

    async def get(self, key: CacheKey) -> CacheEntry | None:
        raw = await self._redis.get(self._key(key))
        if raw is None:
            return None
        try:
            doc = json.loads(raw)
            return CacheEntry(
                key=key,
                data=summary_from_json(doc["data"]),
                timestamp=float(doc["timestamp"]),
                expiry=float(doc["expiry"]),
            )
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning(
                "dashboard_cache_entry_corrupt",
                extra={"key": self._key(key), "error": str(exc)},
            )
            return None

    async def put(self, entry: CacheEntry) -> None:
        doc = {
            "data": summary_to_json(entry.data),
            "timestamp": entry.timestamp,
            "expiry": entry.expiry,
        }
        ttl = max(1, math.ceil(entry.expiry - entry.timestamp) + 1)
        await self._redis.set(self._key(entry.key), json.dumps(doc, separators=(",", ":")), ex=ttl)

    async def delete_user(self, user_id: int) -> int:
        keys = [k async for k in self._redis.scan_iter(match=f"{self._ns}:{user_id}:*")]
        if not keys:
            return 0
        return int(await self._redis.delete(*keys))
