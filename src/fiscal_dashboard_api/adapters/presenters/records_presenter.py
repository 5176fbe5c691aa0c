# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Presenter: Financial records → HTTP SuccessEnvelope.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from typing import Any

from fiscal_dashboard_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from fiscal_dashboard_api.adapters.schemas.http.envelopes import SuccessEnvelope
from fiscal_dashboard_api.adapters.schemas.http.records import (
    AdditionalTaxOut,
    InvoiceOut,
    QuoteOut,
    RecordDeletedOut,
    TransactionOut,
)
from fiscal_dashboard_api.domain.entities.financial_records import (
    AdditionalTax,
    FinancialRecord,
    Invoice,
    Quote,
    Transaction,
)


def _taxes_out(taxes: tuple[AdditionalTax, ...]) -> list[AdditionalTaxOut]:
    return [
        AdditionalTaxOut(
            name=t.name,
            amount=format(t.amount, "f"),
            is_percentage=t.is_percentage,
            value=format(t.value, "f") if t.value is not None else None,
        )
        for t in taxes
    ]


def record_to_http(record: FinancialRecord) -> InvoiceOut | TransactionOut | QuoteOut:
    """Map a stored domain record to its response schema."""
    if record.id is None:
        raise ValueError("only stored records can be presented")
    match record:
        case Invoice():
            return InvoiceOut(
                id=record.id,
                invoice_number=record.invoice_number,
                client_id=record.client_id,
                issue_date=record.issue_date,
                due_date=record.due_date,
                subtotal=format(record.subtotal, "f"),
                tax=format(record.tax, "f"),
                total=format(record.total, "f"),
                status=record.status.value,
                additional_taxes=_taxes_out(record.additional_taxes),
            )
        case Transaction():
            return TransactionOut(
                id=record.id,
                title=record.title,
                description=record.description,
                amount=format(record.amount, "f"),
                transaction_date=record.transaction_date,
                type=record.type.value,
                category_id=record.category_id,
                payment_method=record.payment_method,
                invoice_id=record.invoice_id,
                additional_taxes=_taxes_out(record.additional_taxes),
            )
        case Quote():
            return QuoteOut(
                id=record.id,
                quote_number=record.quote_number,
                client_id=record.client_id,
                issue_date=record.issue_date,
                valid_until=record.valid_until,
                subtotal=format(record.subtotal, "f"),
                tax=format(record.tax, "f"),
                total=format(record.total, "f"),
                status=record.status.value,
                additional_taxes=_taxes_out(record.additional_taxes),
            )
    raise TypeError(f"unsupported record type: {type(record).__name__}")


class RecordsPresenter(BasePresenter):
    """Presenter for the invoice, transaction and quote write endpoints."""

    def present_record(
        self,
        record: FinancialRecord,
        *,
        trace_id: str | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        return self.present_success(data=record_to_http(record), trace_id=trace_id)

    def present_deleted(
        self,
        record_id: int,
        *,
        trace_id: str | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        return self.present_success(data=RecordDeletedOut(id=record_id), trace_id=trace_id)
