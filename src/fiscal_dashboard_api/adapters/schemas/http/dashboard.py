# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Dashboard HTTP Schemas (Adapters Layer)

Purpose:
    Wire shapes of the dashboard endpoints. The summary body is returned bare
    (no envelope) with camelCase names; money is a JSON number rounded to
    2 decimals.

Layer: adapters/schemas/http
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from fiscal_dashboard_api.adapters.schemas.http.base import BaseHTTPSchema, CamelHTTPSchema


class TaxesHTTP(CamelHTTPSchema):
    """Headline tax figures."""

    vat: float
    vat_signed: float
    income_tax: float
    iva_a_liquidar: float


class TaxStatsHTTP(CamelHTTPSchema):
    """Detailed tax statistics."""

    iva_repercutido: float
    iva_soportado: float
    iva_liquidar: float
    irpf_retenido: float
    irpf_total: float
    irpf_pagar: float


class InvoiceStatsHTTP(CamelHTTPSchema):
    """Invoice counters for the period."""

    total: int
    pending: int
    paid: int
    overdue: int
    total_amount: float


class QuoteStatsHTTP(CamelHTTPSchema):
    """Quote counters for the period."""

    total: int
    pending: int
    accepted: int
    rejected: int


class DashboardFilterHTTP(CamelHTTPSchema):
    """Echo of the applied filter plus selector options."""

    applied_year: str
    applied_period: str
    was_filtered: bool
    year_options: list[int]
    period_options: list[str]
    error: bool = False


class DashboardSummaryHTTP(CamelHTTPSchema):
    """Body of ``GET /api/stats/dashboard``."""

    income: float
    expenses: float
    pending_invoices: float
    pending_count: int
    overdue_count: int
    pending_quotes: float
    pending_quotes_count: int
    balance: float
    result: float
    vat_adjusted_result: float
    irpf_adjusted_result: float
    base_imponible: float
    base_imponible_gastos: float
    iva_repercutido: float
    iva_soportado: float
    irpf_retenido_ingresos: float
    total_withholdings: float
    net_income: float
    net_expenses: float
    net_result: float
    period: str
    year: str
    taxes: TaxesHTTP
    tax_stats: TaxStatsHTTP
    issued_count: int
    transaction_count: int
    invoices: InvoiceStatsHTTP
    quotes: QuoteStatsHTTP
    last_quote_date: str | None = None
    filter: DashboardFilterHTTP


class CacheClearHTTP(CamelHTTPSchema):
    """Body of ``POST /api/stats/dashboard-cached/clear``."""

    message: str
    entries_deleted: int


class DashboardStatusHTTP(BaseHTTPSchema):
    """Body of ``GET /api/dashboard-status``; ``updated_at`` is epoch milliseconds."""

    updated_at: int
    last_event: str = Field(alias="lastEvent")


class TouchRequest(BaseHTTPSchema):
    """Body of ``POST /api/dashboard-status/touch``."""

    model_config = ConfigDict(extra="ignore")

    event_type: str | None = Field(default=None, alias="eventType", max_length=64)
    data: dict[str, Any] | None = None


class DashboardEventHTTP(CamelHTTPSchema):
    """One dashboard state change."""

    id: int | None
    event_type: str
    created_at: int
    data: dict[str, Any] | None = None
