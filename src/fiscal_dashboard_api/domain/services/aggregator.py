# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Dashboard Aggregator (Domain Service)

Purpose:
    Fold period-filtered invoices, transactions and quotes into one
    :class:`DashboardSummary`.

Rules:
    * Income and output VAT come from invoices with status ``paid``; expenses
      and input VAT from transactions with type ``expense``.
    * Pending invoices are those with status ``pending``; overdue counts both
      ``overdue`` invoices and pending ones past their due date.
    * Pending quotes are those still awaiting a client response.
    * Sums are accumulated unrounded and rounded to cents once, when the
      summary is built.
    * The flat-rate fallback applies only to records that carry no tax entries
      at all, and only when the policy enables it.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from fiscal_dashboard_api.domain.entities.base import BaseEntity, round_money
from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary
from fiscal_dashboard_api.domain.entities.financial_records import (
    AdditionalTax,
    Invoice,
    Quote,
    Transaction,
)
from fiscal_dashboard_api.domain.enums.financial import (
    AWAITING_RESPONSE_QUOTE_STATUSES,
    InvoiceStatus,
    QuoteStatus,
    TaxKind,
    TransactionType,
)
from fiscal_dashboard_api.domain.services.tax_extractor import extract_taxes

__all__ = ["TaxFallbackPolicy", "aggregate", "year_options"]

_ZERO = Decimal(0)


@dataclass(frozen=True, slots=True)
class TaxFallbackPolicy(BaseEntity):
    """Flat rates assumed for records without any tax entries.

    Args:
        vat_rate: VAT percentage for paid invoices and expenses, or ``None``.
        irpf_rate: IRPF percentage for paid invoices, or ``None``.
    """

    vat_rate: Decimal | None = None
    irpf_rate: Decimal | None = None

    def effective_taxes(
        self,
        taxes: tuple[AdditionalTax, ...],
        *,
        include_irpf: bool,
    ) -> tuple[AdditionalTax, ...]:
        """Return ``taxes`` or, when empty, the synthesized fallback entries."""
        if taxes:
            return taxes
        synthesized: list[AdditionalTax] = []
        if self.vat_rate is not None:
            synthesized.append(AdditionalTax(TaxKind.IVA.value, self.vat_rate, True))
        if include_irpf and self.irpf_rate is not None:
            synthesized.append(AdditionalTax(TaxKind.IRPF.value, -self.irpf_rate, True))
        return tuple(synthesized)


def aggregate(
    invoices: Sequence[Invoice],
    transactions: Sequence[Transaction],
    quotes: Sequence[Quote],
    *,
    fallback: TaxFallbackPolicy | None = None,
    today: date | None = None,
) -> DashboardSummary:
    """Build the dashboard summary for already-filtered records.

    Args:
        invoices: Invoices inside the reporting window.
        transactions: Transactions inside the reporting window.
        quotes: Quotes inside the reporting window.
        fallback: Flat-rate policy for records without tax entries.
        today: Reference date for overdue detection (defaults to today).

    Returns:
        A fully populated summary; every field is zero when all inputs are empty.
    """
    policy = fallback or TaxFallbackPolicy()
    ref_day = today or date.today()

    income = vat_rep = irpf_ret = invoiced = _ZERO
    pending_total = _ZERO
    paid_count = pending_count = overdue_count = 0

    for inv in invoices:
        if inv.status is InvoiceStatus.PAID:
            taxes = policy.effective_taxes(inv.additional_taxes, include_irpf=True)
            parts = extract_taxes(inv.total, taxes, base=inv.subtotal)
            income += parts.base_amount
            vat_rep += parts.vat_amount
            irpf_ret += parts.irpf_amount
            invoiced += inv.total
            paid_count += 1
        elif inv.status is InvoiceStatus.PENDING:
            pending_total += inv.total
            pending_count += 1
            if inv.due_date is not None and inv.due_date < ref_day:
                overdue_count += 1
        elif inv.status is InvoiceStatus.OVERDUE:
            overdue_count += 1

    expenses = vat_sop = irpf_exp = _ZERO
    for tx in transactions:
        if tx.type is not TransactionType.EXPENSE:
            continue
        taxes = policy.effective_taxes(tx.additional_taxes, include_irpf=False)
        parts = extract_taxes(tx.amount, taxes)
        expenses += parts.base_amount
        vat_sop += parts.vat_amount
        irpf_exp += parts.irpf_amount

    quotes_pending_total = _ZERO
    quotes_pending = quotes_accepted = quotes_rejected = 0
    last_quote: date | None = None
    for q in quotes:
        if q.status in AWAITING_RESPONSE_QUOTE_STATUSES:
            quotes_pending += 1
            quotes_pending_total += q.total
        elif q.status is QuoteStatus.ACCEPTED:
            quotes_accepted += 1
        elif q.status is QuoteStatus.REJECTED:
            quotes_rejected += 1
        if last_quote is None or q.issue_date > last_quote:
            last_quote = q.issue_date

    vat_signed = vat_rep - vat_sop
    vat_balance = max(_ZERO, vat_signed)
    irpf_balance = max(_ZERO, irpf_ret)
    balance = income - expenses
    net_income = income - irpf_ret
    net_expenses = expenses - irpf_exp

    return DashboardSummary(
        income=round_money(income),
        expenses=round_money(expenses),
        vat_repercutido=round_money(vat_rep),
        vat_soportado=round_money(vat_sop),
        vat_balance=round_money(vat_balance),
        vat_balance_signed=round_money(vat_signed),
        irpf_retenido=round_money(irpf_ret),
        irpf_expenses=round_money(irpf_exp),
        irpf_balance=round_money(irpf_balance),
        irpf_total=round_money(irpf_ret + irpf_exp),
        pending_invoices_total=round_money(pending_total),
        pending_quotes_total=round_money(quotes_pending_total),
        invoiced_total=round_money(invoiced),
        balance=round_money(balance),
        vat_adjusted_result=round_money(balance - vat_balance),
        irpf_adjusted_result=round_money(balance - irpf_balance),
        result=round_money(balance - vat_balance - irpf_balance),
        net_income=round_money(net_income),
        net_expenses=round_money(net_expenses),
        net_result=round_money(net_income - net_expenses),
        pending_invoices_count=pending_count,
        overdue_count=overdue_count,
        pending_quotes_count=quotes_pending,
        accepted_quotes_count=quotes_accepted,
        rejected_quotes_count=quotes_rejected,
        quotes_count=len(quotes),
        issued_count=len(invoices),
        paid_count=paid_count,
        transaction_count=len(transactions),
        last_quote_date=last_quote,
    )


def year_options(invoices: Iterable[Invoice], *, current_year: int) -> tuple[int, ...]:
    """Years with invoices on record plus ``current_year``, newest first."""
    years = {inv.issue_date.year for inv in invoices}
    years.add(current_year)
    return tuple(sorted(years, reverse=True))
