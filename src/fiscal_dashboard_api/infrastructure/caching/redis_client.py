# src/fiscal_dashboard_api/infrastructure/caching/redis_client.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Async Redis client factory and DI dependency."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import suppress
from typing import TYPE_CHECKING, Any, Protocol, cast, runtime_checkable

import redis.asyncio as aioredis

if TYPE_CHECKING:
    from redis.asyncio.client import Redis as _RedisGeneric

    type AioredisRedis = _RedisGeneric[str]
else:
    from redis.asyncio.client import Redis as AioredisRedis  # type: ignore[assignment]

from fiscal_dashboard_api.config.settings import Settings, get_settings

__all__ = [
    "RedisClient",
    "init_redis",
    "close_redis",
    "get_redis_client",
    "set_redis_client",
]


@runtime_checkable
class RedisClient(Protocol):
    """Minimal async Redis protocol used by the dashboard cache."""

    async def ping(self) -> Any: ...
    async def close(self) -> None: ...

    async def get(self, key: str) -> Any: ...
    async def set(
        self,
        key: str,
        value: Any,
        *,
        ex: int | None = None,
        px: int | None = None,
        nx: bool | None = None,
        xx: bool | None = None,
    ) -> Any: ...
    async def delete(self, *keys: str) -> Any: ...
    def scan_iter(self, match: str | None = None, count: int | None = None) -> AsyncIterator[Any]: ...


_client: RedisClient | None = None


def _create_aioredis_client(url: str, *, socket_timeout: float) -> AioredisRedis:
    """Build the concrete asyncio Redis client from URL."""
    _from_url: Any = aioredis.from_url
    client = _from_url(
        url=url,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=15,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )
    return cast(AioredisRedis, client)


def init_redis(settings: Settings) -> None:
    """Initialize the global async Redis client (idempotent)."""
    global _client
    if _client is not None:
        return
    _client = cast(
        RedisClient,
        _create_aioredis_client(settings.redis_url, socket_timeout=settings.redis_socket_timeout_s),
    )


def set_redis_client(client: RedisClient | None) -> None:
    """Install (or clear) the global client; used by tests with fakeredis."""
    global _client
    _client = client


async def close_redis() -> None:
    """Close the global Redis client at shutdown."""
    global _client
    if _client is not None:
        with suppress(RuntimeError):
            await _client.close()
        _client = None


def get_redis_client() -> RedisClient:
    """Return the initialized Redis client (lazy-inits when lifespan was skipped)."""
    if _client is None:
        init_redis(get_settings())
    if _client is None:
        raise RuntimeError("Redis client not initialized (init_redis failed)")
    return _client
