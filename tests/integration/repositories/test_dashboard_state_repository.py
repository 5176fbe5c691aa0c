# tests/integration/repositories/test_dashboard_state_repository.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Integration tests for the SQLAlchemy DashboardStateRepository on SQLite.

The upsert statements are dialect-native (``ON CONFLICT``), so these tests
exercise the real SQL rather than an in-memory double.
"""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_dashboard_api.adapters.repositories.dashboard_state_repository import (
    DashboardStateRepository,
)
from fiscal_dashboard_api.application.services.dashboard_notifier import DashboardStateNotifier
from fiscal_dashboard_api.infrastructure.database import session as db_session


@pytest.mark.asyncio
async def test_touch_inserts_then_updates(db: AsyncSession) -> None:
    repo = DashboardStateRepository(db)
    first = await repo.touch(7, "invoice-created", now_ms=1_000)
    assert (first.last_event_type, first.updated_at) == ("invoice-created", 1_000)

    second = await repo.touch(7, "quote-deleted", now_ms=2_000)
    assert (second.last_event_type, second.updated_at) == ("quote-deleted", 2_000)


@pytest.mark.asyncio
async def test_touch_is_strictly_monotonic(db: AsyncSession) -> None:
    repo = DashboardStateRepository(db)
    a = await repo.touch(7, "a", now_ms=5_000)
    b = await repo.touch(7, "b", now_ms=5_000)
    c = await repo.touch(7, "c", now_ms=4_000)
    assert a.updated_at < b.updated_at < c.updated_at
    assert c.last_event_type == "c"


@pytest.mark.asyncio
async def test_get_or_create_is_lazy_and_stable(db: AsyncSession) -> None:
    repo = DashboardStateRepository(db)
    created = await repo.get_or_create(9, now_ms=1_000, initial_event="initial")
    assert (created.last_event_type, created.updated_at) == ("initial", 1_000)

    again = await repo.get_or_create(9, now_ms=9_999, initial_event="initial")
    assert again.updated_at == 1_000

    await repo.touch(9, "manual-update", now_ms=2_000)
    assert (await repo.get_or_create(9, now_ms=3_000, initial_event="initial")).last_event_type == (
        "manual-update"
    )


@pytest.mark.asyncio
async def test_events_are_listed_newest_first_per_user(db: AsyncSession) -> None:
    repo = DashboardStateRepository(db)
    await repo.append_event(1, "invoice-created", at_ms=10, data={"id": 3})
    await repo.append_event(1, "invoice-updated", at_ms=20, data={"id": 3})
    await repo.append_event(2, "quote-created", at_ms=30)

    events = await repo.list_events(1, limit=10)
    assert [e.event_type for e in events] == ["invoice-updated", "invoice-created"]
    assert events[1].data == {"id": 3}
    assert len(await repo.list_events(1, limit=1)) == 1


@pytest.mark.asyncio
async def test_concurrent_touches_do_not_lose_updates(db_settings: object) -> None:
    maker = db_session.get_sessionmaker()

    async def _touch(label: str) -> None:
        async with maker() as session:
            notifier = DashboardStateNotifier(DashboardStateRepository(session), clock=lambda: 1_000)
            await notifier.touch(5, label)

    await asyncio.gather(*(_touch(f"event-{i}") for i in range(5)))

    async with maker() as session:
        repo = DashboardStateRepository(session)
        state = await repo.get_or_create(5, now_ms=0, initial_event="initial")
        events = await repo.list_events(5, limit=50)
    assert state.updated_at == 1_004
    assert len(events) == 5
