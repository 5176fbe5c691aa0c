# src/fiscal_dashboard_api/infrastructure/database/session.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Async SQLAlchemy engine/session factory and DI dependency.

This module owns the application-global async SQLAlchemy engine and
`async_sessionmaker`, plus a FastAPI-friendly dependency that yields an
`AsyncSession`.

Lifecycle:
    * Call `init_engine_and_sessionmaker(settings)` at app startup (lifespan).
    * Call `create_all()` when `DB_CREATE_ALL` is set (dev/test databases).
    * Use `get_db_session()` as a dependency in request handlers.
    * Call `dispose_engine()` during shutdown.

Notes:
    * Works with `postgresql+asyncpg://` and `sqlite+aiosqlite://` URLs.
    * Lifespan-less test transports lazily initialize via `get_settings()`.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import suppress

from sqlalchemy.exc import IllegalStateChangeError, InvalidRequestError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fiscal_dashboard_api.config.settings import Settings, get_settings
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def init_engine_and_sessionmaker(settings: Settings) -> None:
    """Initialize the global async engine and sessionmaker (idempotent).

    Raises:
        ValueError: If `database_url` is empty.
    """
    global _engine, _sessionmaker

    if not settings.database_url:
        raise ValueError("database_url must be configured")
    if _engine is not None:
        return

    _engine = create_async_engine(
        url=settings.database_url,
        pool_pre_ping=True,
        echo=False,
    )
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False, class_=AsyncSession)


async def create_all() -> None:
    """Create every mapped table that does not exist yet."""
    from fiscal_dashboard_api.infrastructure.database.models import (  # noqa: F401
        dashboard_state,
        financial_records,
    )
    from fiscal_dashboard_api.infrastructure.database.models.base import Base

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_tables_ensured", extra={"tables": sorted(Base.metadata.tables)})


async def dispose_engine() -> None:
    """Dispose the global engine at application shutdown."""
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_engine() -> AsyncEngine:
    """Return the initialized engine.

    Raises:
        RuntimeError: If the engine is not yet initialized.
    """
    if _engine is None:
        raise RuntimeError("DB engine not initialized (call init_engine_and_sessionmaker)")
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the initialized async sessionmaker.

    Raises:
        RuntimeError: If the sessionmaker is not yet initialized.
    """
    if _sessionmaker is None:
        raise RuntimeError("DB sessionmaker not initialized (call init_engine_and_sessionmaker)")
    return _sessionmaker


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a new `AsyncSession` for DI.

    Rolls back any open transaction and closes the session on exit.
    """
    if _sessionmaker is None:
        init_engine_and_sessionmaker(get_settings())

    session = get_sessionmaker()()
    try:
        yield session
    finally:
        try:
            tx = session.get_transaction()
            if tx and tx.is_active:
                await session.rollback()
        except InvalidRequestError:
            pass
        with suppress(InvalidRequestError, IllegalStateChangeError):
            await session.close()
