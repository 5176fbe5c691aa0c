# src/fiscal_dashboard_api/domain/enums/financial.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Financial record discriminators.

Purpose:
    Stable string enumerations for invoice status, transaction type, quote
    status and the tax kinds the dashboard engine recognizes. Values are the
    lowercase identifiers stored in the database and exchanged over HTTP.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class InvoiceStatus(str, Enum):
    """Lifecycle status of an issued invoice."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELED = "canceled"


class TransactionType(str, Enum):
    """Direction of a bank/cash movement."""

    INCOME = "income"
    EXPENSE = "expense"


class QuoteStatus(str, Enum):
    """Lifecycle status of a quote sent to a client."""

    DRAFT = "draft"
    SENT = "sent"
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


#: Quote statuses still awaiting a client response.
AWAITING_RESPONSE_QUOTE_STATUSES: frozenset[QuoteStatus] = frozenset(
    {QuoteStatus.PENDING, QuoteStatus.SENT}
)


class RecordKind(str, Enum):
    """Financial record variant; values prefix the notifier event types."""

    INVOICE = "invoice"
    TRANSACTION = "transaction"
    QUOTE = "quote"


class TaxKind(str, Enum):
    """Tax line-items with dashboard semantics.

    ``IVA`` is value-added tax on top of the base; ``IRPF`` is an income-tax
    withholding computed over the base.
    """

    IVA = "IVA"
    IRPF = "IRPF"
