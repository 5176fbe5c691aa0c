# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Dashboard Summary Entity

Purpose:
    Immutable output of the aggregation engine for one (user, period). All
    monetary fields are already rounded to cents; the default instance is the
    all-zero summary returned when nothing matches or the backend fails.

Layer: domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Final

from .base import ZERO, BaseEntity


@dataclass(frozen=True, slots=True)
class DashboardSummary(BaseEntity):
    """Aggregated fiscal figures for a reporting period.

    Attributes:
        income: Tax-exclusive base of paid invoices.
        expenses: Tax-exclusive base of expense transactions.
        vat_repercutido: VAT charged on paid invoices.
        vat_soportado: VAT borne on expenses.
        vat_balance: VAT payable, clamped at zero.
        vat_balance_signed: ``vat_repercutido - vat_soportado`` (may be negative).
        irpf_retenido: IRPF withheld by clients on paid invoices.
        irpf_expenses: IRPF withheld on expense transactions.
        irpf_balance: IRPF figure subtracted for net results, clamped at zero.
        irpf_total: ``irpf_retenido + irpf_expenses``.
        pending_invoices_total: Gross total of pending invoices.
        pending_quotes_total: Gross total of quotes awaiting a response.
        invoiced_total: Gross total of paid invoices.
        balance: ``income - expenses``.
        vat_adjusted_result: ``balance - vat_balance``.
        irpf_adjusted_result: ``balance - irpf_balance``.
        result: ``balance - vat_balance - irpf_balance``.
        net_income: ``income - irpf_retenido``.
        net_expenses: ``expenses - irpf_expenses``.
        net_result: ``net_income - net_expenses``.
        last_quote_date: Issue date of the most recent quote, if any.
        year_options: Years with invoices on record, newest first.
    """

    income: Decimal = ZERO
    expenses: Decimal = ZERO
    vat_repercutido: Decimal = ZERO
    vat_soportado: Decimal = ZERO
    vat_balance: Decimal = ZERO
    vat_balance_signed: Decimal = ZERO
    irpf_retenido: Decimal = ZERO
    irpf_expenses: Decimal = ZERO
    irpf_balance: Decimal = ZERO
    irpf_total: Decimal = ZERO
    pending_invoices_total: Decimal = ZERO
    pending_quotes_total: Decimal = ZERO
    invoiced_total: Decimal = ZERO
    balance: Decimal = ZERO
    vat_adjusted_result: Decimal = ZERO
    irpf_adjusted_result: Decimal = ZERO
    result: Decimal = ZERO
    net_income: Decimal = ZERO
    net_expenses: Decimal = ZERO
    net_result: Decimal = ZERO

    pending_invoices_count: int = 0
    overdue_count: int = 0
    pending_quotes_count: int = 0
    accepted_quotes_count: int = 0
    rejected_quotes_count: int = 0
    quotes_count: int = 0
    issued_count: int = 0
    paid_count: int = 0
    transaction_count: int = 0

    last_quote_date: date | None = None
    year_options: tuple[int, ...] = ()


#: Names of the integer counter fields.
COUNT_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "pending_invoices_count",
        "overdue_count",
        "pending_quotes_count",
        "accepted_quotes_count",
        "rejected_quotes_count",
        "quotes_count",
        "issued_count",
        "paid_count",
        "transaction_count",
    }
)

#: Names of the monetary fields, in declaration order.
MONEY_FIELDS: Final[tuple[str, ...]] = tuple(
    f.name
    for f in fields(DashboardSummary)
    if f.name not in COUNT_FIELDS and f.name not in {"last_quote_date", "year_options"}
)
