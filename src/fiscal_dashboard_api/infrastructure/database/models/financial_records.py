# src/fiscal_dashboard_api/infrastructure/database/models/financial_records.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Financial Record Models.

Purpose:
    Persistence shape of invoices, transactions and quotes. Money columns are
    ``NUMERIC(12, 2)``; ``additional_taxes`` is stored as a JSON list of
    ``{"name", "amount", "isPercentage"}`` objects. Legacy rows may hold a JSON
    string instead of a list; the repository tolerates both.

Layer:
    infrastructure
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_dashboard_api.infrastructure.database.models.base import (
    Base,
    IdType,
    JSONType,
    ReprMixin,
)

_MONEY = Numeric(12, 2)


class InvoiceModel(Base, ReprMixin):
    """Invoice row."""

    __tablename__ = "invoices"
    __table_args__ = (Index("ix_invoices_user_id_issue_date", "user_id", "issue_date"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, nullable=False)
    client_id: Mapped[int | None] = mapped_column(IdType, nullable=True)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    subtotal: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    tax: Mapped[Decimal] = mapped_column(_MONEY, nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    additional_taxes: Mapped[Any] = mapped_column(JSONType, nullable=True)


class TransactionModel(Base, ReprMixin):
    """Transaction row."""

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_id_date", "user_id", "transaction_date"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    category_id: Mapped[int | None] = mapped_column(IdType, nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    invoice_id: Mapped[int | None] = mapped_column(IdType, nullable=True)
    additional_taxes: Mapped[Any] = mapped_column(JSONType, nullable=True)


class QuoteModel(Base, ReprMixin):
    """Quote row."""

    __tablename__ = "quotes"
    __table_args__ = (Index("ix_quotes_user_id_issue_date", "user_id", "issue_date"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, nullable=False)
    client_id: Mapped[int | None] = mapped_column(IdType, nullable=True)
    quote_number: Mapped[str] = mapped_column(String(64), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    valid_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    subtotal: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    tax: Mapped[Decimal] = mapped_column(_MONEY, nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    additional_taxes: Mapped[Any] = mapped_column(JSONType, nullable=True)
