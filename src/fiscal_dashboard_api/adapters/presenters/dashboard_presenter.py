# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Presenter: Dashboard report and status → HTTP schemas.

Synopsis:
    Renders the application ``DashboardReportDTO`` into the bare
    ``DashboardSummaryHTTP`` body expected by dashboard clients, and attaches
    the filter echo and cache headers. Dashboard responses are never cacheable
    by intermediaries.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Final

from fiscal_dashboard_api.adapters.presenters.base_presenter import (
    BasePresenter,
    PresentResult,
    compute_quoted_etag,
)
from fiscal_dashboard_api.adapters.schemas.http.dashboard import (
    CacheClearHTTP,
    DashboardEventHTTP,
    DashboardFilterHTTP,
    DashboardStatusHTTP,
    DashboardSummaryHTTP,
    InvoiceStatsHTTP,
    QuoteStatsHTTP,
    TaxesHTTP,
    TaxStatsHTTP,
)
from fiscal_dashboard_api.adapters.schemas.http.envelopes import SuccessEnvelope
from fiscal_dashboard_api.application.schemas.dto.dashboard import (
    CacheClearResultDTO,
    DashboardReportDTO,
)
from fiscal_dashboard_api.domain.entities.base import round_money
from fiscal_dashboard_api.domain.entities.dashboard_state import DashboardEvent, DashboardState
from fiscal_dashboard_api.domain.entities.period import PERIOD_OPTIONS

NO_STORE: Final[str] = "no-store, private, max-age=0"


def _num(value: Decimal) -> float:
    return float(round_money(value))


class DashboardPresenter(BasePresenter):
    """Presenter for ``/api/stats`` and ``/api/dashboard-status`` responses."""

    def present_summary(
        self,
        report: DashboardReportDTO,
        *,
        trace_id: str | None = None,
    ) -> PresentResult[DashboardSummaryHTTP]:
        """Build the summary body plus ``X-Dashboard-*`` and no-store headers."""
        s = report.summary
        body = DashboardSummaryHTTP(
            income=_num(s.income),
            expenses=_num(s.expenses),
            pending_invoices=_num(s.pending_invoices_total),
            pending_count=s.pending_invoices_count,
            overdue_count=s.overdue_count,
            pending_quotes=_num(s.pending_quotes_total),
            pending_quotes_count=s.pending_quotes_count,
            balance=_num(s.balance),
            result=_num(s.result),
            vat_adjusted_result=_num(s.vat_adjusted_result),
            irpf_adjusted_result=_num(s.irpf_adjusted_result),
            base_imponible=_num(s.income),
            base_imponible_gastos=_num(s.expenses),
            iva_repercutido=_num(s.vat_repercutido),
            iva_soportado=_num(s.vat_soportado),
            irpf_retenido_ingresos=_num(s.irpf_retenido),
            total_withholdings=_num(s.irpf_expenses),
            net_income=_num(s.net_income),
            net_expenses=_num(s.net_expenses),
            net_result=_num(s.net_result),
            period=report.period,
            year=report.year,
            taxes=TaxesHTTP(
                vat=_num(s.vat_balance),
                vat_signed=_num(s.vat_balance_signed),
                income_tax=_num(s.irpf_balance),
                iva_a_liquidar=_num(s.vat_balance),
            ),
            tax_stats=TaxStatsHTTP(
                iva_repercutido=_num(s.vat_repercutido),
                iva_soportado=_num(s.vat_soportado),
                iva_liquidar=_num(s.vat_balance),
                irpf_retenido=_num(s.irpf_retenido),
                irpf_total=_num(s.irpf_total),
                irpf_pagar=_num(s.irpf_balance),
            ),
            issued_count=s.issued_count,
            transaction_count=s.transaction_count,
            invoices=InvoiceStatsHTTP(
                total=s.issued_count,
                pending=s.pending_invoices_count,
                paid=s.paid_count,
                overdue=s.overdue_count,
                total_amount=_num(s.invoiced_total),
            ),
            quotes=QuoteStatsHTTP(
                total=s.quotes_count,
                pending=s.pending_quotes_count,
                accepted=s.accepted_quotes_count,
                rejected=s.rejected_quotes_count,
            ),
            last_quote_date=s.last_quote_date.isoformat() if s.last_quote_date else None,
            filter=DashboardFilterHTTP(
                applied_year=report.year,
                applied_period=report.period,
                was_filtered=report.was_filtered,
                year_options=list(s.year_options),
                period_options=list(PERIOD_OPTIONS),
                error=report.error,
            ),
        )

        headers = {
            "X-Dashboard-Year": report.year,
            "X-Dashboard-Period": report.period,
            "X-Dashboard-Cache": "HIT" if report.cache_hit else "MISS",
            "Cache-Control": NO_STORE,
        }
        if trace_id:
            headers["X-Request-ID"] = trace_id
        return PresentResult(body=body, headers=headers)

    def present_cache_clear(self, dto: CacheClearResultDTO) -> PresentResult[CacheClearHTTP]:
        body = CacheClearHTTP(
            message=f"Dashboard cache cleared for user {dto.user_id}",
            entries_deleted=dto.entries_deleted,
        )
        return PresentResult(body=body, headers={"Cache-Control": NO_STORE})

    def present_status(self, state: DashboardState) -> PresentResult[DashboardStatusHTTP]:
        body = DashboardStatusHTTP(updated_at=state.updated_at, last_event=state.last_event_type)
        return PresentResult(body=body, headers={"Cache-Control": NO_STORE})

    def present_events(
        self,
        events: Sequence[DashboardEvent],
        *,
        trace_id: str | None = None,
    ) -> PresentResult[SuccessEnvelope[list[DashboardEventHTTP]]]:
        items = [
            DashboardEventHTTP(
                id=e.id,
                event_type=e.event_type,
                created_at=e.created_at,
                data=dict(e.data) if e.data is not None else None,
            )
            for e in events
        ]
        body = SuccessEnvelope[list[DashboardEventHTTP]](data=items)
        headers = {"ETag": compute_quoted_etag(body.model_dump_http()), "Cache-Control": NO_STORE}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        return PresentResult(body=body, headers=headers)
