# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Financial Record HTTP Schemas (Adapters Layer)

Purpose:
    Request bodies and response items of the invoice, transaction and quote
    write endpoints. Names are camelCase on the wire; snake_case is accepted
    on input. Money is exchanged as decimal strings in responses and accepted
    as numbers or numeric strings in requests.

Layer: adapters/schemas/http
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import Field, field_validator

from fiscal_dashboard_api.adapters.schemas.http.base import CamelHTTPSchema
from fiscal_dashboard_api.domain.enums.financial import (
    InvoiceStatus,
    QuoteStatus,
    TransactionType,
)

Money = Annotated[Decimal, Field(max_digits=12, decimal_places=2)]


class AdditionalTaxHTTP(CamelHTTPSchema):
    """Named tax adjustment; negative amounts are withholdings."""

    name: str = Field(min_length=1, max_length=32)
    amount: Decimal
    is_percentage: bool = False
    value: Decimal | None = None


class _RecordIn(CamelHTTPSchema):
    additional_taxes: list[AdditionalTaxHTTP] = Field(default_factory=list)

    @field_validator("status", "type", mode="before", check_fields=False)
    @classmethod
    def _lowercase_enum(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value


class InvoiceIn(_RecordIn):
    """Create/replace body for ``/api/invoices``."""

    invoice_number: str = Field(min_length=1, max_length=64)
    client_id: int | None = None
    issue_date: date
    due_date: date | None = None
    subtotal: Money
    tax: Money = Decimal("0")
    total: Money
    status: InvoiceStatus = InvoiceStatus.PENDING


class TransactionIn(_RecordIn):
    """Create/replace body for ``/api/transactions``."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    amount: Money
    transaction_date: date = Field(alias="date")
    type: TransactionType
    category_id: int | None = None
    payment_method: str | None = Field(default=None, max_length=32)
    invoice_id: int | None = None


class QuoteIn(_RecordIn):
    """Create/replace body for ``/api/quotes``."""

    quote_number: str = Field(min_length=1, max_length=64)
    client_id: int | None = None
    issue_date: date
    valid_until: date | None = None
    subtotal: Money
    tax: Money = Decimal("0")
    total: Money
    status: QuoteStatus = QuoteStatus.DRAFT


class AdditionalTaxOut(CamelHTTPSchema):
    """Stored tax adjustment."""

    name: str
    amount: str
    is_percentage: bool
    value: str | None = None


class InvoiceOut(CamelHTTPSchema):
    """Stored invoice."""

    id: int
    invoice_number: str
    client_id: int | None
    issue_date: date
    due_date: date | None
    subtotal: str
    tax: str
    total: str
    status: str
    additional_taxes: list[AdditionalTaxOut]


class TransactionOut(CamelHTTPSchema):
    """Stored transaction."""

    id: int
    title: str
    description: str | None
    amount: str
    transaction_date: date = Field(alias="date")
    type: str
    category_id: int | None
    payment_method: str | None
    invoice_id: int | None
    additional_taxes: list[AdditionalTaxOut]


class QuoteOut(CamelHTTPSchema):
    """Stored quote."""

    id: int
    quote_number: str
    client_id: int | None
    issue_date: date
    valid_until: date | None
    subtotal: str
    tax: str
    total: str
    status: str
    additional_taxes: list[AdditionalTaxOut]


class RecordDeletedOut(CamelHTTPSchema):
    """Acknowledgement of a delete."""

    id: int
    deleted: bool = True
