# src/fiscal_dashboard_api/dependencies/dashboard.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the fiscal dashboard (repositories, services, use cases).

Overview:
    FastAPI dependency providers consumed by the stats, dashboard-status and
    record routers. Every provider returns the real collaborator type; tests
    substitute them through ``app.dependency_overrides``.

Design:
    * One ``DashboardResultCache`` per application, built by
      :func:`build_result_cache` at startup and kept on ``app.state``. If the
      lifespan did not run (lifespan-less test transports) it is built lazily.
    * Repositories and the notifier are per-request, bound to the request's
      ``AsyncSession``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_dashboard_api.adapters.repositories.dashboard_state_repository import (
    DashboardStateRepository,
)
from fiscal_dashboard_api.adapters.repositories.financial_records_repository import (
    FinancialRecordsRepository,
)
from fiscal_dashboard_api.application.interfaces.summary_store import SummaryStore
from fiscal_dashboard_api.application.services.dashboard_notifier import DashboardStateNotifier
from fiscal_dashboard_api.application.services.result_cache import DashboardResultCache
from fiscal_dashboard_api.application.use_cases.dashboard.clear_dashboard_cache import (
    ClearDashboardCache,
)
from fiscal_dashboard_api.application.use_cases.dashboard.dashboard_status import (
    GetDashboardStatus,
    ListDashboardEvents,
    TouchDashboardStatus,
)
from fiscal_dashboard_api.application.use_cases.dashboard.get_dashboard_summary import (
    GetDashboardSummary,
)
from fiscal_dashboard_api.application.use_cases.records.save_financial_record import (
    DeleteFinancialRecord,
    SaveFinancialRecord,
)
from fiscal_dashboard_api.config.settings import Settings, get_settings
from fiscal_dashboard_api.domain.services.aggregator import TaxFallbackPolicy
from fiscal_dashboard_api.infrastructure.caching.redis_client import get_redis_client
from fiscal_dashboard_api.infrastructure.caching.summary_store import (
    InMemorySummaryStore,
    RedisSummaryStore,
)
from fiscal_dashboard_api.infrastructure.database.session import get_db_session
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


# =============================================================================
# Application-scoped services
# =============================================================================


def build_summary_store(settings: Settings) -> SummaryStore:
    """Select the summary store backend from settings."""
    if settings.dashboard_cache_backend == "redis":
        return RedisSummaryStore(get_redis_client(), namespace=settings.dashboard_cache_namespace)
    return InMemorySummaryStore()


def build_result_cache(settings: Settings) -> DashboardResultCache:
    """Build the application's dashboard result cache."""
    cache = DashboardResultCache(
        build_summary_store(settings),
        ttl_s=settings.dashboard_cache_ttl_s,
    )
    logger.info(
        "dashboard_cache_configured",
        extra={
            "backend": settings.dashboard_cache_backend,
            "ttl_s": settings.dashboard_cache_ttl_s,
        },
    )
    return cache


def get_result_cache(request: Request) -> DashboardResultCache:
    """Return the application's result cache, building it on first use."""
    cache: DashboardResultCache | None = getattr(request.app.state, "dashboard_cache", None)
    if cache is None:
        cache = build_result_cache(get_settings())
        request.app.state.dashboard_cache = cache
    return cache


def get_fallback_policy() -> TaxFallbackPolicy:
    """Return the configured tax fallback policy (disabled unless rates are set)."""
    settings = get_settings()
    return TaxFallbackPolicy(
        vat_rate=settings.fallback_vat_rate,
        irpf_rate=settings.fallback_irpf_rate,
    )


# =============================================================================
# Request-scoped collaborators
# =============================================================================


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_records_repository(session: SessionDep) -> FinancialRecordsRepository:
    return FinancialRecordsRepository(session)


def get_state_repository(session: SessionDep) -> DashboardStateRepository:
    return DashboardStateRepository(session)


def get_notifier(
    repository: Annotated[DashboardStateRepository, Depends(get_state_repository)],
) -> DashboardStateNotifier:
    return DashboardStateNotifier(repository)


CacheDep = Annotated[DashboardResultCache, Depends(get_result_cache)]
NotifierDep = Annotated[DashboardStateNotifier, Depends(get_notifier)]
RecordsDep = Annotated[FinancialRecordsRepository, Depends(get_records_repository)]


# =============================================================================
# Use cases
# =============================================================================


def get_dashboard_summary_uc(
    records: RecordsDep,
    cache: CacheDep,
    fallback: Annotated[TaxFallbackPolicy, Depends(get_fallback_policy)],
) -> GetDashboardSummary:
    return GetDashboardSummary(records, cache, fallback=fallback)


def get_clear_dashboard_cache_uc(cache: CacheDep) -> ClearDashboardCache:
    return ClearDashboardCache(cache)


def get_dashboard_status_uc(notifier: NotifierDep) -> GetDashboardStatus:
    return GetDashboardStatus(notifier)


def get_touch_dashboard_status_uc(notifier: NotifierDep) -> TouchDashboardStatus:
    return TouchDashboardStatus(notifier)


def get_list_dashboard_events_uc(notifier: NotifierDep) -> ListDashboardEvents:
    return ListDashboardEvents(notifier, max_limit=get_settings().events_page_limit)


def get_save_record_uc(records: RecordsDep, notifier: NotifierDep) -> SaveFinancialRecord:
    return SaveFinancialRecord(records, notifier)


def get_delete_record_uc(records: RecordsDep, notifier: NotifierDep) -> DeleteFinancialRecord:
    return DeleteFinancialRecord(records, notifier)
