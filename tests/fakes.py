# tests/fakes.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""In-memory collaborators for application-layer tests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from fiscal_dashboard_api.domain.entities.dashboard_state import DashboardEvent, DashboardState
from fiscal_dashboard_api.domain.entities.financial_records import Invoice, Quote, Transaction


class FakeStateRepository:
    """Dict-backed ``DashboardStateRepository`` with the same monotonic rule."""

    def __init__(self) -> None:
        self.rows: dict[int, DashboardState] = {}
        self.events: list[DashboardEvent] = []
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise RuntimeError("state store down")

    async def touch(self, user_id: int, event_type: str, *, now_ms: int) -> DashboardState:
        self._check()
        prev = self.rows.get(user_id)
        updated = now_ms if prev is None or now_ms > prev.updated_at else prev.updated_at + 1
        state = DashboardState(user_id, event_type, updated)
        self.rows[user_id] = state
        return state

    async def get_or_create(
        self, user_id: int, *, now_ms: int, initial_event: str
    ) -> DashboardState:
        self._check()
        return self.rows.setdefault(user_id, DashboardState(user_id, initial_event, now_ms))

    async def append_event(
        self,
        user_id: int,
        event_type: str,
        *,
        at_ms: int,
        data: Mapping[str, Any] | None = None,
    ) -> DashboardEvent:
        self._check()
        event = DashboardEvent(len(self.events) + 1, user_id, event_type, at_ms, data)
        self.events.append(event)
        return event

    async def list_events(self, user_id: int, *, limit: int) -> Sequence[DashboardEvent]:
        self._check()
        mine = [e for e in self.events if e.user_id == user_id]
        return sorted(mine, key=lambda e: (e.created_at, e.id or 0), reverse=True)[:limit]


class FakeRecords:
    """Reader/writer over plain lists."""

    def __init__(
        self,
        invoices: Sequence[Invoice] = (),
        transactions: Sequence[Transaction] = (),
        quotes: Sequence[Quote] = (),
    ) -> None:
        self.invoices = list(invoices)
        self.transactions = list(transactions)
        self.quotes = list(quotes)
        self.reads = 0
        self.fail = False
        self._next_id = 100

    async def get_invoices_by_user_id(self, user_id: int) -> Sequence[Invoice]:
        self.reads += 1
        if self.fail:
            raise RuntimeError("records store down")
        return [i for i in self.invoices if i.user_id == user_id]

    async def get_transactions_by_user_id(self, user_id: int) -> Sequence[Transaction]:
        return [t for t in self.transactions if t.user_id == user_id]

    async def get_quotes_by_user_id(self, user_id: int) -> Sequence[Quote]:
        return [q for q in self.quotes if q.user_id == user_id]

    def _assign(self, record: Any) -> Any:
        if record.id is not None:
            return record
        self._next_id += 1
        return replace(record, id=self._next_id)

    async def save_invoice(self, invoice: Invoice) -> Invoice:
        saved = self._assign(invoice)
        self.invoices.append(saved)
        return saved

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        saved = self._assign(transaction)
        self.transactions.append(saved)
        return saved

    async def save_quote(self, quote: Quote) -> Quote:
        saved = self._assign(quote)
        self.quotes.append(saved)
        return saved

    async def delete_invoice(self, user_id: int, invoice_id: int) -> bool:
        before = len(self.invoices)
        self.invoices = [i for i in self.invoices if (i.user_id, i.id) != (user_id, invoice_id)]
        return len(self.invoices) < before

    async def delete_transaction(self, user_id: int, transaction_id: int) -> bool:
        return False

    async def delete_quote(self, user_id: int, quote_id: int) -> bool:
        return False
