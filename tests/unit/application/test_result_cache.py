# tests/unit/application/test_result_cache.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from decimal import Decimal

import pytest

from fiscal_dashboard_api.application.services.result_cache import DashboardResultCache
from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary
from fiscal_dashboard_api.infrastructure.caching.summary_store import InMemorySummaryStore


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingCompute:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> DashboardSummary:
        self.calls += 1
        return DashboardSummary(income=Decimal(self.calls))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemorySummaryStore:
    return InMemorySummaryStore()


@pytest.fixture
def cache(store: InMemorySummaryStore, clock: FakeClock) -> DashboardResultCache:
    return DashboardResultCache(store, ttl_s=30, clock=clock)


@pytest.mark.asyncio
async def test_second_lookup_is_a_hit(cache: DashboardResultCache) -> None:
    compute = CountingCompute()
    first = await cache.get_or_compute(1, 2024, "all", force_refresh=False, compute=compute)
    second = await cache.get_or_compute(1, 2024, "all", force_refresh=False, compute=compute)
    assert (first.hit, second.hit) == (False, True)
    assert second.data == first.data
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_force_refresh_recomputes(cache: DashboardResultCache) -> None:
    compute = CountingCompute()
    await cache.get_or_compute(1, 2024, "q1", force_refresh=False, compute=compute)
    fresh = await cache.get_or_compute(1, 2024, "q1", force_refresh=True, compute=compute)
    assert fresh.hit is False
    assert fresh.data.income == Decimal(2)
    assert compute.calls == 2


@pytest.mark.asyncio
async def test_entry_expires_after_ttl(cache: DashboardResultCache, clock: FakeClock) -> None:
    compute = CountingCompute()
    await cache.get_or_compute(1, None, "all", force_refresh=False, compute=compute)
    clock.now += 29
    assert (await cache.get_or_compute(1, None, "all", force_refresh=False, compute=compute)).hit
    clock.now += 1
    again = await cache.get_or_compute(1, None, "all", force_refresh=False, compute=compute)
    assert again.hit is False
    assert compute.calls == 2


@pytest.mark.asyncio
async def test_keys_are_scoped_by_user_year_and_period(cache: DashboardResultCache) -> None:
    compute = CountingCompute()
    for user, year, period in [(1, 2024, "all"), (2, 2024, "all"), (1, 2023, "all"), (1, 2024, "q1")]:
        lookup = await cache.get_or_compute(user, year, period, force_refresh=False, compute=compute)
        assert lookup.hit is False
    assert compute.calls == 4


@pytest.mark.asyncio
async def test_clear_user_drops_only_that_user(
    cache: DashboardResultCache, store: InMemorySummaryStore
) -> None:
    compute = CountingCompute()
    await cache.get_or_compute(1, 2024, "all", force_refresh=False, compute=compute)
    await cache.get_or_compute(1, 2024, "q2", force_refresh=False, compute=compute)
    await cache.get_or_compute(2, 2024, "all", force_refresh=False, compute=compute)

    assert await cache.clear_user(1) == 2
    assert len(store) == 1
    assert (await cache.get_or_compute(2, 2024, "all", force_refresh=False, compute=compute)).hit


@pytest.mark.asyncio
async def test_compute_errors_propagate_and_are_not_cached(cache: DashboardResultCache) -> None:
    async def boom() -> DashboardSummary:
        raise RuntimeError("db down")

    with pytest.raises(RuntimeError):
        await cache.get_or_compute(1, 2024, "all", force_refresh=False, compute=boom)

    compute = CountingCompute()
    lookup = await cache.get_or_compute(1, 2024, "all", force_refresh=False, compute=compute)
    assert lookup.hit is False


def test_ttl_must_be_positive(store: InMemorySummaryStore) -> None:
    with pytest.raises(ValueError):
        DashboardResultCache(store, ttl_s=0)
