# src/fiscal_dashboard_api/dependencies/core/bootstrap.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (DB, Redis, dashboard cache).

This module owns the lifecycle of shared infrastructure used by the FastAPI app.
Configuration is read from Settings; heavy lifting is delegated to the
infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields the resolved Settings and the application's dashboard result cache.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from fiscal_dashboard_api.application.services.result_cache import DashboardResultCache
from fiscal_dashboard_api.config.settings import Settings, get_settings
from fiscal_dashboard_api.dependencies.dashboard import build_result_cache
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    dashboard_cache: DashboardResultCache


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and tear down shared infrastructure.

    Responsibilities:
        * Initialize the DB engine/sessionmaker (and tables when DB_CREATE_ALL).
        * Initialize the Redis client when the cache backend is ``redis``.
        * Build the dashboard result cache and expose it on ``app.state``.
        * Shut everything down on exit, even on error.
    """
    settings: Settings = get_settings()
    logger.info("bootstrap.start", extra={"environment": settings.environment.value})

    # Imported here so tests can monkeypatch their functions.
    import fiscal_dashboard_api.infrastructure.caching.redis_client as redis_client
    import fiscal_dashboard_api.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(settings)
    if settings.db_create_all:
        await db_session.create_all()
    if settings.dashboard_cache_backend == "redis":
        redis_client.init_redis(settings)

    cache = build_result_cache(settings)
    app.state.dashboard_cache = cache
    state = BootstrapState(settings=settings, dashboard_cache=cache)

    try:
        yield state
    finally:
        try:
            await redis_client.close_redis()
        except Exception:
            logger.exception("bootstrap.redis_close_failed")

        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
