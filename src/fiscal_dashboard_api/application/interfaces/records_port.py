# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Financial Records Ports.

Synopsis:
    Storage collaborator contracts consumed by the dashboard engine (read
    side) and by the record write use cases (write side). Implementations
    return domain entities with validated tax lists.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from fiscal_dashboard_api.domain.entities.financial_records import Invoice, Quote, Transaction


class FinancialRecordsReader(Protocol):
    """Read access to a user's financial records."""

    async def get_invoices_by_user_id(self, user_id: int) -> Sequence[Invoice]:
        """Return every invoice owned by ``user_id``."""
        ...

    async def get_transactions_by_user_id(self, user_id: int) -> Sequence[Transaction]:
        """Return every transaction owned by ``user_id``."""
        ...

    async def get_quotes_by_user_id(self, user_id: int) -> Sequence[Quote]:
        """Return every quote owned by ``user_id``."""
        ...


class FinancialRecordsWriter(Protocol):
    """Write access to financial records.

    ``save_*`` inserts when the entity has no id and replaces the stored row
    otherwise; replacing a missing row raises ``RecordNotFoundError``.
    ``delete_*`` returns False when nothing matched.
    """

    async def save_invoice(self, invoice: Invoice) -> Invoice: ...

    async def save_transaction(self, transaction: Transaction) -> Transaction: ...

    async def save_quote(self, quote: Quote) -> Quote: ...

    async def delete_invoice(self, user_id: int, invoice_id: int) -> bool: ...

    async def delete_transaction(self, user_id: int, transaction_id: int) -> bool: ...

    async def delete_quote(self, user_id: int, quote_id: int) -> bool: ...
