# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Use Cases: Save / Delete Financial Record

Purpose:
    Persist invoice, transaction and quote changes, then touch the owner's
    dashboard state so polling clients refetch.

Failure policy:
    The write is authoritative. A failure to touch the dashboard state after a
    successful write is logged and does not fail the request; clients catch
    up on the next touch or cache expiry.

Layer: application/use_cases
"""

from __future__ import annotations

from fiscal_dashboard_api.application.interfaces.records_port import FinancialRecordsWriter
from fiscal_dashboard_api.application.services.dashboard_notifier import DashboardStateNotifier
from fiscal_dashboard_api.domain.entities.financial_records import (
    FinancialRecord,
    Invoice,
    Quote,
    Transaction,
)
from fiscal_dashboard_api.domain.enums.financial import RecordKind
from fiscal_dashboard_api.domain.exceptions.dashboard import RecordNotFoundError
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def record_kind(record: FinancialRecord) -> RecordKind:
    """Return the variant of ``record``."""
    match record:
        case Invoice():
            return RecordKind.INVOICE
        case Transaction():
            return RecordKind.TRANSACTION
        case Quote():
            return RecordKind.QUOTE
    raise TypeError(f"unsupported record type: {type(record).__name__}")


async def _notify(
    notifier: DashboardStateNotifier,
    user_id: int,
    event_type: str,
    record_id: int | None,
) -> None:
    try:
        await notifier.touch(user_id, event_type, data={"id": record_id})
    except Exception:
        logger.exception(
            "dashboard_notify_failed",
            extra={"user_id": user_id, "event_type": event_type, "record_id": record_id},
        )


class SaveFinancialRecord:
    """Create (``id is None``) or replace a financial record."""

    def __init__(self, writer: FinancialRecordsWriter, notifier: DashboardStateNotifier) -> None:
        self._writer = writer
        self._notifier = notifier

    async def execute(self, record: FinancialRecord) -> FinancialRecord:
        """Persist ``record`` and emit ``<kind>-created`` or ``<kind>-updated``.

        Raises:
            RecordNotFoundError: If replacing a record the caller does not own.
            StorageUnavailableError: If the write failed.
        """
        kind = record_kind(record)
        action = "created" if record.id is None else "updated"
        saved: FinancialRecord
        match record:
            case Invoice():
                saved = await self._writer.save_invoice(record)
            case Transaction():
                saved = await self._writer.save_transaction(record)
            case Quote():
                saved = await self._writer.save_quote(record)

        logger.info(
            "financial_record_saved",
            extra={"user_id": saved.user_id, "kind": kind.value, "id": saved.id, "action": action},
        )
        await _notify(self._notifier, saved.user_id, f"{kind.value}-{action}", saved.id)
        return saved


class DeleteFinancialRecord:
    """Delete one of the caller's financial records."""

    def __init__(self, writer: FinancialRecordsWriter, notifier: DashboardStateNotifier) -> None:
        self._writer = writer
        self._notifier = notifier

    async def execute(self, kind: RecordKind, user_id: int, record_id: int) -> None:
        """Delete and emit ``<kind>-deleted``.

        Raises:
            RecordNotFoundError: If no such record belongs to the caller.
            StorageUnavailableError: If the delete failed.
        """
        match kind:
            case RecordKind.INVOICE:
                deleted = await self._writer.delete_invoice(user_id, record_id)
            case RecordKind.TRANSACTION:
                deleted = await self._writer.delete_transaction(user_id, record_id)
            case RecordKind.QUOTE:
                deleted = await self._writer.delete_quote(user_id, record_id)

        if not deleted:
            raise RecordNotFoundError(
                f"{kind.value} {record_id} not found",
                details={"kind": kind.value, "id": record_id},
            )
        logger.info(
            "financial_record_deleted",
            extra={"user_id": user_id, "kind": kind.value, "id": record_id},
        )
        await _notify(self._notifier, user_id, f"{kind.value}-deleted", record_id)
