# tests/unit/application/test_dashboard_notifier.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import pytest
from fakes import FakeStateRepository

from fiscal_dashboard_api.application.services.dashboard_notifier import (
    DashboardStateNotifier,
    epoch_ms,
)
from fiscal_dashboard_api.domain.exceptions.dashboard import InvalidUserError


class StepClock:
    def __init__(self, *values: int) -> None:
        self._values = list(values)

    def __call__(self) -> int:
        return self._values.pop(0) if len(self._values) > 1 else self._values[0]


@pytest.mark.asyncio
async def test_first_read_creates_initial_state() -> None:
    notifier = DashboardStateNotifier(FakeStateRepository(), clock=lambda: 1_000)
    state = await notifier.read(7)
    assert state.last_event_type == "initial"
    assert state.updated_at == 1_000
    assert (await notifier.read(7)).updated_at == 1_000


@pytest.mark.asyncio
async def test_touch_then_read_reports_the_event() -> None:
    notifier = DashboardStateNotifier(FakeStateRepository(), clock=StepClock(1_000, 2_000))
    before = await notifier.read(7)
    await notifier.touch(7, "invoice-created")
    after = await notifier.read(7)
    assert after.last_event_type == "invoice-created"
    assert after.updated_at > before.updated_at


@pytest.mark.asyncio
async def test_updated_at_advances_even_when_the_clock_does_not() -> None:
    notifier = DashboardStateNotifier(FakeStateRepository(), clock=lambda: 5_000)
    first = await notifier.touch(7, "invoice-created")
    second = await notifier.touch(7, "quote-updated")
    assert second.updated_at == first.updated_at + 1
    assert second.last_event_type == "quote-updated"


@pytest.mark.asyncio
async def test_touch_records_history_newest_first() -> None:
    repo = FakeStateRepository()
    notifier = DashboardStateNotifier(repo, clock=StepClock(1, 2, 3))
    await notifier.touch(7, "invoice-created", data={"id": 1})
    await notifier.touch(7, "invoice-deleted", data={"id": 1})
    await notifier.touch(8, "quote-created")
    events = await notifier.recent_events(7, limit=10)
    assert [e.event_type for e in events] == ["invoice-deleted", "invoice-created"]
    assert events[1].data == {"id": 1}


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", [0, -3])
async def test_invalid_user_is_rejected(user_id: int) -> None:
    notifier = DashboardStateNotifier(FakeStateRepository())
    with pytest.raises(InvalidUserError):
        await notifier.read(user_id)
    with pytest.raises(InvalidUserError):
        await notifier.touch(user_id, "manual-update")


@pytest.mark.asyncio
async def test_blank_event_type_is_rejected() -> None:
    notifier = DashboardStateNotifier(FakeStateRepository())
    with pytest.raises(ValueError):
        await notifier.touch(7, "  ")


def test_epoch_ms_is_milliseconds() -> None:
    assert epoch_ms() > 1_600_000_000_000
