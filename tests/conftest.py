# tests/conftest.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Shared fixtures: isolated settings and a throwaway SQLite database per test."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from fiscal_dashboard_api.config.settings import Settings, get_settings  # noqa: E402
from fiscal_dashboard_api.infrastructure.database import session as db_session  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Rebuild settings from the (possibly monkeypatched) environment per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def db_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[Settings, None]:
    """Point the global engine at a fresh SQLite file with all tables created."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'fiscal.db'}")
    get_settings.cache_clear()
    settings = get_settings()

    await db_session.dispose_engine()
    db_session.init_engine_and_sessionmaker(settings)
    await db_session.create_all()
    try:
        yield settings
    finally:
        await db_session.dispose_engine()


@pytest.fixture
async def db(db_settings: Settings) -> AsyncGenerator[AsyncSession, None]:
    async with db_session.get_sessionmaker()() as session:
        yield session


@pytest.fixture
async def client(db_settings: Settings) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client over the full application (lifespan not run)."""
    from fiscal_dashboard_api.main import create_app

    app = create_app()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
