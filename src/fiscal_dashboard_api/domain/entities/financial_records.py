# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Financial Record Entities

Purpose:
    Immutable domain representations of the three record variants the
    dashboard engine folds: invoices, bank/cash transactions and quotes, plus
    the named tax adjustments embedded in each of them.

Layer: domain/entities

Notes:
    Tax lists arrive here already validated (see
    ``application.schemas.dto.additional_tax.parse_additional_taxes``); the
    entities only enforce structural invariants.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from fiscal_dashboard_api.domain.enums.financial import (
    InvoiceStatus,
    QuoteStatus,
    TaxKind,
    TransactionType,
)

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class AdditionalTax(BaseEntity):
    """Named tax adjustment attached to a record.

    Args:
        name: Free-form label. ``IVA`` and ``IRPF`` carry dashboard semantics.
        amount: Percentage when ``is_percentage`` is true, otherwise a money
            amount. Negative values denote a withholding.
        is_percentage: Whether ``amount`` is a rate over the record base.
        value: Exact tax amount realized on the record, when stored. Takes
            precedence over recomputing it from ``amount``.

    Raises:
        ValueError: If the name is blank.
    """

    name: str
    amount: Decimal
    is_percentage: bool = False
    value: Decimal | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("tax name must be non-empty")

    @property
    def kind(self) -> TaxKind | None:
        """Return the recognized tax kind, matching the name case-insensitively."""
        label = self.name.strip().upper()
        for kind in TaxKind:
            if label == kind.value:
                return kind
        return None

    def realized(self, base: Decimal) -> Decimal:
        """Return the monetary value of this entry over ``base``."""
        if self.is_percentage:
            return base * self.amount / Decimal(100)
        return self.amount


@dataclass(frozen=True, slots=True)
class Invoice(BaseEntity):
    """Invoice issued to a client.

    ``subtotal`` is the tax-exclusive base and ``total`` the amount due after
    every tax contribution (withholdings reduce it).
    """

    id: int | None
    user_id: int
    invoice_number: str
    issue_date: date
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: InvoiceStatus
    due_date: date | None = None
    client_id: int | None = None
    additional_taxes: tuple[AdditionalTax, ...] = ()

    def __post_init__(self) -> None:
        if self.user_id <= 0:
            raise ValueError("user_id must be positive")
        if not self.invoice_number:
            raise ValueError("invoice_number must be non-empty")

    @property
    def record_date(self) -> date:
        """Date used for period classification."""
        return self.issue_date


@dataclass(frozen=True, slots=True)
class Transaction(BaseEntity):
    """Income or expense movement; ``amount`` is the gross, tax-inclusive value."""

    id: int | None
    user_id: int
    title: str
    amount: Decimal
    transaction_date: date
    type: TransactionType
    description: str | None = None
    category_id: int | None = None
    payment_method: str | None = None
    invoice_id: int | None = None
    additional_taxes: tuple[AdditionalTax, ...] = ()

    def __post_init__(self) -> None:
        if self.user_id <= 0:
            raise ValueError("user_id must be positive")

    @property
    def record_date(self) -> date:
        """Date used for period classification."""
        return self.transaction_date


@dataclass(frozen=True, slots=True)
class Quote(BaseEntity):
    """Quote (estimate) sent to a client."""

    id: int | None
    user_id: int
    quote_number: str
    issue_date: date
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: QuoteStatus
    valid_until: date | None = None
    client_id: int | None = None
    additional_taxes: tuple[AdditionalTax, ...] = ()

    def __post_init__(self) -> None:
        if self.user_id <= 0:
            raise ValueError("user_id must be positive")
        if not self.quote_number:
            raise ValueError("quote_number must be non-empty")

    @property
    def record_date(self) -> date:
        """Date used for period classification."""
        return self.issue_date


type FinancialRecord = Invoice | Transaction | Quote
