# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Dashboard Summary

Purpose:
    Produce the fiscal dashboard for a user and reporting window. Serves from
    the result cache when possible; otherwise fetches the user's records,
    filters them by period, aggregates them and caches the result.

Failure policy:
    The dashboard never hard-fails. Any error while fetching or aggregating is
    logged and answered with the all-zero summary, echoing the requested year
    and period and flagging ``error=True``.

Layer: application/use_cases
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from decimal import Decimal

from fiscal_dashboard_api.application.interfaces.records_port import FinancialRecordsReader
from fiscal_dashboard_api.application.schemas.dto.dashboard import DashboardReportDTO
from fiscal_dashboard_api.application.services.result_cache import DashboardResultCache
from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary
from fiscal_dashboard_api.domain.entities.period import ALL_PERIODS, PeriodSpec
from fiscal_dashboard_api.domain.exceptions.dashboard import InvalidUserError
from fiscal_dashboard_api.domain.services.aggregator import (
    TaxFallbackPolicy,
    aggregate,
    year_options,
)
from fiscal_dashboard_api.domain.services.period_filter import filter_records
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger
from fiscal_dashboard_api.infrastructure.observability.metrics import (
    get_dashboard_compute_duration_seconds,
)

logger = get_json_logger(__name__)

#: Paid-invoice income below which recorded IRPF looks like a data-entry slip.
_IRPF_SANITY_FLOOR = Decimal(10)


class GetDashboardSummary:
    """Use case returning the dashboard report for one reporting window.

    Args:
        records: Storage collaborator supplying the user's records.
        cache: Result cache shared across requests of this process.
        fallback: Flat-rate policy for records without tax entries.
        today: Date provider used for defaults and overdue detection.
    """

    def __init__(
        self,
        records: FinancialRecordsReader,
        cache: DashboardResultCache,
        *,
        fallback: TaxFallbackPolicy | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._records = records
        self._cache = cache
        self._fallback = fallback or TaxFallbackPolicy()
        self._today = today

    async def execute(
        self,
        user_id: int,
        *,
        year: str | None = None,
        period: str | None = None,
        force_refresh: bool = False,
    ) -> DashboardReportDTO:
        """Return the dashboard report.

        Args:
            user_id: Authenticated dashboard owner.
            year: ``YYYY``, ``all`` for all-time, or ``None`` for the current year.
            period: ``all``, ``qN`` or ``mN``; ``None`` means ``all``.
            force_refresh: Bypass the result cache.

        Returns:
            DashboardReportDTO, zeroed with ``error=True`` on backend failure.

        Raises:
            InvalidUserError: If ``user_id`` is not a positive integer.
        """
        if user_id <= 0:
            raise InvalidUserError("user id must be a positive integer", details={"user_id": user_id})

        today = self._today()
        was_filtered = bool(year) or bool(period)
        applied_period = (period or ALL_PERIODS).strip().lower()
        raw_year = (year or "").strip()

        try:
            spec = PeriodSpec.parse(raw_year, applied_period, current_year=today.year)
        except ValueError:
            logger.warning("dashboard_year_invalid", extra={"user_id": user_id, "year": raw_year})
            return DashboardReportDTO(
                summary=DashboardSummary(year_options=(today.year,)),
                year=raw_year,
                period=applied_period,
                was_filtered=was_filtered,
            )

        if spec.granularity == "unknown":
            # Never cached: arbitrary selectors must not grow the cache.
            logger.warning(
                "period_unrecognized",
                extra={"user_id": user_id, "year": spec.year_label, "period": spec.period},
            )
            return DashboardReportDTO(
                summary=DashboardSummary(year_options=(today.year,)),
                year=spec.year_label,
                period=spec.period,
                was_filtered=was_filtered,
            )

        async def _compute() -> DashboardSummary:
            return await self._compute(user_id, spec, today)

        try:
            lookup = await self._cache.get_or_compute(
                user_id,
                spec.year,
                spec.period,
                force_refresh=force_refresh,
                compute=_compute,
            )
        except Exception:
            logger.exception(
                "dashboard_summary_failed",
                extra={"user_id": user_id, "year": spec.year_label, "period": spec.period},
            )
            return DashboardReportDTO(
                summary=DashboardSummary(year_options=(today.year,)),
                year=spec.year_label,
                period=spec.period,
                was_filtered=was_filtered,
                error=True,
            )

        return DashboardReportDTO(
            summary=lookup.data,
            year=spec.year_label,
            period=spec.period,
            was_filtered=was_filtered,
            cache_hit=lookup.hit,
        )

    async def _compute(self, user_id: int, spec: PeriodSpec, today: date) -> DashboardSummary:
        """Fetch, filter and aggregate the user's records."""
        started = time.perf_counter()
        invoices = await self._records.get_invoices_by_user_id(user_id)
        transactions = await self._records.get_transactions_by_user_id(user_id)
        quotes = await self._records.get_quotes_by_user_id(user_id)

        summary = aggregate(
            filter_records(invoices, spec),
            filter_records(transactions, spec),
            filter_records(quotes, spec),
            fallback=self._fallback,
            today=today,
        )
        summary = replace(summary, year_options=year_options(invoices, current_year=today.year))
        if summary.irpf_retenido > 0 and summary.income < _IRPF_SANITY_FLOOR:
            logger.warning(
                "irpf_income_suspicious",
                extra={
                    "user_id": user_id,
                    "income": str(summary.income),
                    "irpf_retenido": str(summary.irpf_retenido),
                },
            )

        elapsed = time.perf_counter() - started
        get_dashboard_compute_duration_seconds().observe(elapsed)
        logger.info(
            "dashboard_summary_computed",
            extra={
                "user_id": user_id,
                "year": spec.year_label,
                "period": spec.period,
                "invoices": len(invoices),
                "transactions": len(transactions),
                "quotes": len(quotes),
                "duration_s": round(elapsed, 6),
            },
        )
        return summary
