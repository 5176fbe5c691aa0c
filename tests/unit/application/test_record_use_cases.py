# tests/unit/application/test_record_use_cases.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import pytest
from factories import make_expense, make_invoice, make_quote
from fakes import FakeRecords, FakeStateRepository

from fiscal_dashboard_api.application.services.dashboard_notifier import DashboardStateNotifier
from fiscal_dashboard_api.application.use_cases.records.save_financial_record import (
    DeleteFinancialRecord,
    SaveFinancialRecord,
    record_kind,
)
from fiscal_dashboard_api.domain.enums.financial import RecordKind
from fiscal_dashboard_api.domain.exceptions.dashboard import RecordNotFoundError


@pytest.fixture
def state_repo() -> FakeStateRepository:
    return FakeStateRepository()


@pytest.fixture
def notifier(state_repo: FakeStateRepository) -> DashboardStateNotifier:
    return DashboardStateNotifier(state_repo, clock=lambda: 1_000)


def test_record_kind() -> None:
    assert record_kind(make_invoice()) is RecordKind.INVOICE
    assert record_kind(make_expense()) is RecordKind.TRANSACTION
    assert record_kind(make_quote()) is RecordKind.QUOTE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("record", "event"),
    [
        (make_invoice(), "invoice-created"),
        (make_expense(), "transaction-created"),
        (make_quote(), "quote-created"),
        (make_invoice(record_id=5), "invoice-updated"),
    ],
)
async def test_save_touches_dashboard_state(
    record: object,
    event: str,
    notifier: DashboardStateNotifier,
    state_repo: FakeStateRepository,
) -> None:
    saved = await SaveFinancialRecord(FakeRecords(), notifier).execute(record)  # type: ignore[arg-type]
    assert saved.id is not None
    assert state_repo.rows[1].last_event_type == event
    assert state_repo.events[-1].data == {"id": saved.id}


@pytest.mark.asyncio
async def test_notify_failure_does_not_fail_the_write(
    notifier: DashboardStateNotifier, state_repo: FakeStateRepository
) -> None:
    state_repo.fail = True
    records = FakeRecords()
    saved = await SaveFinancialRecord(records, notifier).execute(make_invoice())
    assert saved.id is not None
    assert records.invoices == [saved]


@pytest.mark.asyncio
async def test_delete_emits_deleted_event(
    notifier: DashboardStateNotifier, state_repo: FakeStateRepository
) -> None:
    records = FakeRecords(invoices=[make_invoice(record_id=9)])
    await DeleteFinancialRecord(records, notifier).execute(RecordKind.INVOICE, 1, 9)
    assert records.invoices == []
    assert state_repo.rows[1].last_event_type == "invoice-deleted"


@pytest.mark.asyncio
async def test_delete_of_missing_record_raises_and_does_not_notify(
    notifier: DashboardStateNotifier, state_repo: FakeStateRepository
) -> None:
    with pytest.raises(RecordNotFoundError):
        await DeleteFinancialRecord(FakeRecords(), notifier).execute(RecordKind.QUOTE, 1, 404)
    assert state_repo.rows == {}
