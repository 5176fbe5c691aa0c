# tests/integration/repositories/test_financial_records_repository.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Integration tests for FinancialRecordsRepository on SQLite."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from factories import IRPF_15, IVA_21, make_expense, make_invoice, make_quote
from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_dashboard_api.adapters.repositories.financial_records_repository import (
    FinancialRecordsRepository,
)
from fiscal_dashboard_api.domain.enums.financial import InvoiceStatus, QuoteStatus
from fiscal_dashboard_api.domain.exceptions.dashboard import RecordNotFoundError
from fiscal_dashboard_api.infrastructure.database.models.financial_records import (
    InvoiceModel,
    QuoteModel,
    TransactionModel,
)


@pytest.mark.asyncio
async def test_invoice_round_trip_keeps_money_and_taxes(db: AsyncSession) -> None:
    repo = FinancialRecordsRepository(db)
    saved = await repo.save_invoice(make_invoice(total="1060.00", taxes=(IVA_21, IRPF_15)))
    assert saved.id is not None

    (loaded,) = await repo.get_invoices_by_user_id(1)
    assert loaded.id == saved.id
    assert loaded.total == Decimal("1060.00")
    assert loaded.status is InvoiceStatus.PAID
    assert loaded.additional_taxes == (IVA_21, IRPF_15)


@pytest.mark.asyncio
async def test_reads_are_scoped_to_the_user(db: AsyncSession) -> None:
    repo = FinancialRecordsRepository(db)
    await repo.save_invoice(make_invoice(user_id=1))
    await repo.save_invoice(make_invoice(user_id=2))
    await repo.save_transaction(make_expense(user_id=2))
    await repo.save_quote(make_quote(user_id=2))

    assert len(await repo.get_invoices_by_user_id(1)) == 1
    assert await repo.get_transactions_by_user_id(1) == []
    assert len(await repo.get_transactions_by_user_id(2)) == 1
    assert len(await repo.get_quotes_by_user_id(2)) == 1


@pytest.mark.asyncio
async def test_update_replaces_fields(db: AsyncSession) -> None:
    repo = FinancialRecordsRepository(db)
    saved = await repo.save_quote(make_quote())
    changed = replace(saved, status=QuoteStatus.ACCEPTED, total=Decimal("750.00"))
    updated = await repo.save_quote(changed)
    assert updated.id == saved.id
    (loaded,) = await repo.get_quotes_by_user_id(1)
    assert loaded.status is QuoteStatus.ACCEPTED
    assert loaded.total == Decimal("750.00")


@pytest.mark.asyncio
async def test_update_of_foreign_record_is_not_found(db: AsyncSession) -> None:
    repo = FinancialRecordsRepository(db)
    saved = await repo.save_invoice(make_invoice(user_id=1))
    with pytest.raises(RecordNotFoundError):
        await repo.save_invoice(make_invoice(user_id=2, record_id=saved.id))


@pytest.mark.asyncio
async def test_delete_reports_whether_a_row_went_away(db: AsyncSession) -> None:
    repo = FinancialRecordsRepository(db)
    saved = await repo.save_transaction(make_expense())
    assert saved.id is not None
    assert await repo.delete_transaction(2, saved.id) is False
    assert await repo.delete_transaction(1, saved.id) is True
    assert await repo.delete_transaction(1, saved.id) is False


@pytest.mark.asyncio
async def test_legacy_rows_are_read_leniently(db: AsyncSession) -> None:
    db.add_all(
        [
            InvoiceModel(
                user_id=3,
                invoice_number="OLD-1",
                issue_date=date(2024, 1, 5),
                subtotal=Decimal("100"),
                tax=Decimal("21"),
                total=Decimal("121"),
                status="PAID",
                additional_taxes="not json",
            ),
            InvoiceModel(
                user_id=3,
                invoice_number="OLD-2",
                issue_date=date(2024, 1, 6),
                subtotal=Decimal("100"),
                tax=Decimal("0"),
                total=Decimal("100"),
                status="archived",
            ),
            TransactionModel(
                user_id=3,
                title="mystery",
                amount=Decimal("10"),
                transaction_date=date(2024, 1, 7),
                type="transfer",
            ),
            QuoteModel(
                user_id=3,
                quote_number="Q-OLD",
                issue_date=date(2024, 1, 8),
                subtotal=Decimal("10"),
                tax=Decimal("0"),
                total=Decimal("10"),
                status="weird",
            ),
        ]
    )
    await db.commit()

    repo = FinancialRecordsRepository(db)
    old_paid, old_unknown = await repo.get_invoices_by_user_id(3)
    assert old_paid.status is InvoiceStatus.PAID
    assert old_paid.additional_taxes == ()
    assert old_unknown.status is InvoiceStatus.CANCELED
    assert await repo.get_transactions_by_user_id(3) == []
    (quote,) = await repo.get_quotes_by_user_id(3)
    assert quote.status is QuoteStatus.DRAFT
