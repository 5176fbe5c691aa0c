# src/fiscal_dashboard_api/adapters/mappers/records_mapper.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Financial record request mapping.

Purpose:
    Convert validated HTTP request bodies into frozen domain entities owned by
    the calling user.

Layer:
    adapters/mappers
"""

from __future__ import annotations

from collections.abc import Iterable

from fiscal_dashboard_api.adapters.schemas.http.records import (
    AdditionalTaxHTTP,
    InvoiceIn,
    QuoteIn,
    TransactionIn,
)
from fiscal_dashboard_api.domain.entities.financial_records import (
    AdditionalTax,
    Invoice,
    Quote,
    Transaction,
)
from fiscal_dashboard_api.domain.enums.financial import (
    InvoiceStatus,
    QuoteStatus,
    TransactionType,
)


def _taxes(items: Iterable[AdditionalTaxHTTP]) -> tuple[AdditionalTax, ...]:
    return tuple(
        AdditionalTax(name=t.name, amount=t.amount, is_percentage=t.is_percentage, value=t.value)
        for t in items
    )


def invoice_from_http(body: InvoiceIn, *, user_id: int, record_id: int | None = None) -> Invoice:
    return Invoice(
        id=record_id,
        user_id=user_id,
        invoice_number=body.invoice_number,
        issue_date=body.issue_date,
        subtotal=body.subtotal,
        tax=body.tax,
        total=body.total,
        status=InvoiceStatus(body.status),
        due_date=body.due_date,
        client_id=body.client_id,
        additional_taxes=_taxes(body.additional_taxes),
    )


def transaction_from_http(
    body: TransactionIn,
    *,
    user_id: int,
    record_id: int | None = None,
) -> Transaction:
    return Transaction(
        id=record_id,
        user_id=user_id,
        title=body.title,
        amount=body.amount,
        transaction_date=body.transaction_date,
        type=TransactionType(body.type),
        description=body.description,
        category_id=body.category_id,
        payment_method=body.payment_method,
        invoice_id=body.invoice_id,
        additional_taxes=_taxes(body.additional_taxes),
    )


def quote_from_http(body: QuoteIn, *, user_id: int, record_id: int | None = None) -> Quote:
    return Quote(
        id=record_id,
        user_id=user_id,
        quote_number=body.quote_number,
        issue_date=body.issue_date,
        subtotal=body.subtotal,
        tax=body.tax,
        total=body.total,
        status=QuoteStatus(body.status),
        valid_until=body.valid_until,
        client_id=body.client_id,
        additional_taxes=_taxes(body.additional_taxes),
    )
