# src/fiscal_dashboard_api/adapters/repositories/financial_records_repository.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Financial Records Repository (SQLAlchemy).

Purpose:
    Concrete implementation of the ``FinancialRecordsReader`` and
    ``FinancialRecordsWriter`` ports over the invoices, transactions and
    quotes tables.

Layer:
    adapters

Notes:
    * Reads map ORM rows to frozen domain entities. ``additional_taxes`` is
      parsed leniently: a malformed payload is logged and read as "no taxes".
    * Stored enum values are matched case-insensitively; unknown invoice and
      quote statuses degrade to a status that contributes no money, unknown
      transaction types are skipped.
    * Writes are scoped by ``user_id``: a record owned by another user is
      reported as not found.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_dashboard_api.adapters.repositories.base_repository import BaseRepository
from fiscal_dashboard_api.application.schemas.dto.additional_tax import (
    dump_additional_taxes,
    parse_additional_taxes,
)
from fiscal_dashboard_api.domain.entities.financial_records import Invoice, Quote, Transaction
from fiscal_dashboard_api.domain.enums.financial import (
    InvoiceStatus,
    QuoteStatus,
    TransactionType,
)
from fiscal_dashboard_api.domain.exceptions.dashboard import RecordNotFoundError
from fiscal_dashboard_api.infrastructure.database.models.financial_records import (
    InvoiceModel,
    QuoteModel,
    TransactionModel,
)
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _coerce_enum[E: Enum](enum_cls: type[E], raw: str | None) -> E | None:
    try:
        return enum_cls((raw or "").strip().lower())
    except ValueError:
        return None


def _money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


class FinancialRecordsRepository(BaseRepository[Any]):
    """SQLAlchemy-backed reader/writer of invoices, transactions and quotes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    # ------------------------------------------------------------------
    # Row -> entity mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_invoice(row: InvoiceModel) -> Invoice:
        status = _coerce_enum(InvoiceStatus, row.status)
        if status is None:
            logger.warning(
                "record_status_unknown",
                extra={"record": f"invoice:{row.id}", "status": row.status},
            )
            status = InvoiceStatus.CANCELED
        return Invoice(
            id=row.id,
            user_id=row.user_id,
            invoice_number=row.invoice_number,
            issue_date=row.issue_date,
            subtotal=_money(row.subtotal),
            tax=_money(row.tax),
            total=_money(row.total),
            status=status,
            due_date=row.due_date,
            client_id=row.client_id,
            additional_taxes=parse_additional_taxes(row.additional_taxes, record=f"invoice:{row.id}"),
        )

    @staticmethod
    def _to_transaction(row: TransactionModel) -> Transaction | None:
        kind = _coerce_enum(TransactionType, row.type)
        if kind is None:
            logger.warning(
                "record_type_unknown",
                extra={"record": f"transaction:{row.id}", "type": row.type},
            )
            return None
        return Transaction(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            amount=_money(row.amount),
            transaction_date=row.transaction_date,
            type=kind,
            description=row.description,
            category_id=row.category_id,
            payment_method=row.payment_method,
            invoice_id=row.invoice_id,
            additional_taxes=parse_additional_taxes(
                row.additional_taxes, record=f"transaction:{row.id}"
            ),
        )

    @staticmethod
    def _to_quote(row: QuoteModel) -> Quote:
        status = _coerce_enum(QuoteStatus, row.status)
        if status is None:
            logger.warning(
                "record_status_unknown",
                extra={"record": f"quote:{row.id}", "status": row.status},
            )
            status = QuoteStatus.DRAFT
        return Quote(
            id=row.id,
            user_id=row.user_id,
            quote_number=row.quote_number,
            issue_date=row.issue_date,
            subtotal=_money(row.subtotal),
            tax=_money(row.tax),
            total=_money(row.total),
            status=status,
            valid_until=row.valid_until,
            client_id=row.client_id,
            additional_taxes=parse_additional_taxes(row.additional_taxes, record=f"quote:{row.id}"),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_invoices_by_user_id(self, user_id: int) -> Sequence[Invoice]:
        stmt = select(InvoiceModel).where(InvoiceModel.user_id == user_id).order_by(InvoiceModel.id)
        with self.storage_guard("get_invoices", user_id=user_id):
            rows = await self.fetch_all(stmt)
        return [self._to_invoice(r) for r in rows]

    async def get_transactions_by_user_id(self, user_id: int) -> Sequence[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.user_id == user_id)
            .order_by(TransactionModel.id)
        )
        with self.storage_guard("get_transactions", user_id=user_id):
            rows = await self.fetch_all(stmt)
        return [t for t in (self._to_transaction(r) for r in rows) if t is not None]

    async def get_quotes_by_user_id(self, user_id: int) -> Sequence[Quote]:
        stmt = select(QuoteModel).where(QuoteModel.user_id == user_id).order_by(QuoteModel.id)
        with self.storage_guard("get_quotes", user_id=user_id):
            rows = await self.fetch_all(stmt)
        return [self._to_quote(r) for r in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _upsert_row(
        self,
        model: type[Any],
        kind: str,
        record_id: int | None,
        user_id: int,
        values: dict[str, Any],
    ) -> Any:
        """Insert a new row or overwrite the caller's existing one, then commit."""
        with self.storage_guard(f"save_{kind}", user_id=user_id):
            if record_id is None:
                row = model(user_id=user_id, **values)
                self._session.add(row)
            else:
                stmt = select(model).where(model.id == record_id, model.user_id == user_id)
                row = await self.fetch_optional(stmt)
                if row is None:
                    raise RecordNotFoundError(
                        f"{kind} {record_id} not found",
                        details={"kind": kind, "id": record_id},
                    )
                for name, value in values.items():
                    setattr(row, name, value)
            await self._session.flush()
            await self._session.commit()
        return row

    async def _delete_row(self, model: type[Any], kind: str, user_id: int, record_id: int) -> bool:
        stmt = delete(model).where(model.id == record_id, model.user_id == user_id)
        with self.storage_guard(f"delete_{kind}", user_id=user_id):
            result = await self._session.execute(stmt)
            await self._session.commit()
        return bool(result.rowcount)

    async def save_invoice(self, invoice: Invoice) -> Invoice:
        row = await self._upsert_row(
            InvoiceModel,
            "invoice",
            invoice.id,
            invoice.user_id,
            {
                "invoice_number": invoice.invoice_number,
                "issue_date": invoice.issue_date,
                "due_date": invoice.due_date,
                "client_id": invoice.client_id,
                "subtotal": invoice.subtotal,
                "tax": invoice.tax,
                "total": invoice.total,
                "status": invoice.status.value,
                "additional_taxes": dump_additional_taxes(invoice.additional_taxes),
            },
        )
        return replace(invoice, id=row.id)

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        row = await self._upsert_row(
            TransactionModel,
            "transaction",
            transaction.id,
            transaction.user_id,
            {
                "title": transaction.title,
                "description": transaction.description,
                "amount": transaction.amount,
                "transaction_date": transaction.transaction_date,
                "type": transaction.type.value,
                "category_id": transaction.category_id,
                "payment_method": transaction.payment_method,
                "invoice_id": transaction.invoice_id,
                "additional_taxes": dump_additional_taxes(transaction.additional_taxes),
            },
        )
        return replace(transaction, id=row.id)

    async def save_quote(self, quote: Quote) -> Quote:
        row = await self._upsert_row(
            QuoteModel,
            "quote",
            quote.id,
            quote.user_id,
            {
                "quote_number": quote.quote_number,
                "issue_date": quote.issue_date,
                "valid_until": quote.valid_until,
                "client_id": quote.client_id,
                "subtotal": quote.subtotal,
                "tax": quote.tax,
                "total": quote.total,
                "status": quote.status.value,
                "additional_taxes": dump_additional_taxes(quote.additional_taxes),
            },
        )
        return replace(quote, id=row.id)

    async def delete_invoice(self, user_id: int, invoice_id: int) -> bool:
        return await self._delete_row(InvoiceModel, "invoice", user_id, invoice_id)

    async def delete_transaction(self, user_id: int, transaction_id: int) -> bool:
        return await self._delete_row(TransactionModel, "transaction", user_id, transaction_id)

    async def delete_quote(self, user_id: int, quote_id: int) -> bool:
        return await self._delete_row(QuoteModel, "quote", user_id, quote_id)
