# tests/unit/domain/test_aggregator.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from datetime import date
from decimal import Decimal

from factories import IRPF_15, IVA_21, make_expense, make_invoice, make_quote

from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary
from fiscal_dashboard_api.domain.enums.financial import (
    InvoiceStatus,
    QuoteStatus,
    TransactionType,
)
from fiscal_dashboard_api.domain.services.aggregator import (
    TaxFallbackPolicy,
    aggregate,
    year_options,
)

D = Decimal
TODAY = date(2024, 6, 1)


def test_empty_inputs_give_the_zero_summary() -> None:
    assert aggregate([], [], [], today=TODAY) == DashboardSummary()


def test_paid_invoice_with_vat() -> None:
    s = aggregate([make_invoice()], [], [], today=TODAY)
    assert s.income == D("1000.00")
    assert s.vat_repercutido == D("210.00")
    assert s.invoiced_total == D("1210.00")
    assert s.vat_balance == D("210.00")
    assert s.result == D("790.00")
    assert (s.paid_count, s.issued_count) == (1, 1)


def test_expense_vat_offsets_output_vat() -> None:
    s = aggregate([make_invoice()], [make_expense()], [], today=TODAY)
    assert s.expenses == D("100.00")
    assert s.vat_soportado == D("21.00")
    assert s.vat_balance == D("189.00")
    assert s.vat_balance_signed == D("189.00")
    assert s.balance == D("900.00")
    assert s.transaction_count == 1


def test_irpf_withholding_reduces_net_income() -> None:
    inv = make_invoice(total="1060.00", taxes=(IVA_21, IRPF_15))
    s = aggregate([inv], [], [], today=TODAY)
    assert s.irpf_retenido == D("150.00")
    assert s.irpf_balance == D("150.00")
    assert s.irpf_total == D("150.00")
    assert s.net_income == D("850.00")
    assert s.irpf_adjusted_result == D("850.00")
    assert s.result == D("640.00")


def test_vat_balance_is_clamped_but_signed_value_is_kept() -> None:
    s = aggregate([], [make_expense(amount="242.00")], [], today=TODAY)
    assert s.vat_balance == D("0.00")
    assert s.vat_balance_signed == D("-42.00")


def test_income_transactions_do_not_count_as_expenses() -> None:
    s = aggregate([], [make_expense(type_=TransactionType.INCOME)], [], today=TODAY)
    assert s.expenses == D("0.00")
    assert s.transaction_count == 1


def test_pending_and_overdue_invoices() -> None:
    invoices = [
        make_invoice(status=InvoiceStatus.PENDING, due_date=date(2024, 5, 1)),
        make_invoice(status=InvoiceStatus.PENDING, due_date=date(2024, 7, 1), total="100.00"),
        make_invoice(status=InvoiceStatus.OVERDUE),
        make_invoice(status=InvoiceStatus.CANCELED),
    ]
    s = aggregate(invoices, [], [], today=TODAY)
    assert s.pending_invoices_count == 2
    assert s.pending_invoices_total == D("1310.00")
    assert s.overdue_count == 2
    assert s.income == D("0.00")
    assert s.issued_count == 4


def test_quote_counters() -> None:
    quotes = [
        make_quote(status=QuoteStatus.SENT, total="500.00"),
        make_quote(status=QuoteStatus.PENDING, total="300.00", issue_date=date(2024, 5, 9)),
        make_quote(status=QuoteStatus.ACCEPTED),
        make_quote(status=QuoteStatus.REJECTED),
        make_quote(status=QuoteStatus.DRAFT, issue_date=date(2024, 1, 1)),
    ]
    s = aggregate([], [], quotes, today=TODAY)
    assert s.pending_quotes_count == 2
    assert s.pending_quotes_total == D("800.00")
    assert (s.accepted_quotes_count, s.rejected_quotes_count) == (1, 1)
    assert s.quotes_count == 5
    assert s.last_quote_date == date(2024, 5, 9)


def test_rounding_happens_once_at_the_boundary() -> None:
    s = aggregate([], [make_expense(amount="10.00")], [], today=TODAY)
    assert s.expenses == D("8.26")
    assert s.vat_soportado == D("1.74")


def test_fallback_is_disabled_by_default() -> None:
    inv = make_invoice(total="1000.00", taxes=())
    s = aggregate([inv], [], [], today=TODAY)
    assert s.vat_repercutido == D("0.00")
    assert s.irpf_retenido == D("0.00")


def test_fallback_applies_only_to_records_without_taxes() -> None:
    policy = TaxFallbackPolicy(vat_rate=D("21"), irpf_rate=D("15"))
    untaxed = make_invoice(total="1000.00", taxes=())
    taxed = make_invoice(number="F-002")
    s = aggregate([untaxed, taxed], [make_expense(taxes=())], [], fallback=policy, today=TODAY)
    assert s.vat_repercutido == D("420.00")
    assert s.irpf_retenido == D("150.00")
    assert s.vat_soportado == D("21.00")
    assert s.irpf_expenses == D("0.00")


def test_year_options_are_newest_first_and_include_current_year() -> None:
    invoices = [
        make_invoice(issue_date=date(2022, 1, 1)),
        make_invoice(issue_date=date(2024, 1, 1)),
        make_invoice(issue_date=date(2022, 9, 1)),
    ]
    assert year_options(invoices, current_year=2025) == (2025, 2024, 2022)
    assert year_options([], current_year=2025) == (2025,)
