# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Financial Records Router.

Summary:
    Create, replace and delete the caller's invoices, transactions and quotes.
    Every successful write touches the caller's dashboard state so polling
    clients refetch their dashboard.

    * ``POST   /api/{invoices|transactions|quotes}``       → 201 SuccessEnvelope
    * ``PUT    /api/{invoices|transactions|quotes}/{id}``  → 200 SuccessEnvelope
    * ``DELETE /api/{invoices|transactions|quotes}/{id}``  → 200 SuccessEnvelope

    Errors: 401 ``INVALID_USER``, 404 ``RECORD_NOT_FOUND``,
    503 ``STORAGE_UNAVAILABLE``.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status

from fiscal_dashboard_api.adapters.deps.identity import require_user_id
from fiscal_dashboard_api.adapters.mappers.records_mapper import (
    invoice_from_http,
    quote_from_http,
    transaction_from_http,
)
from fiscal_dashboard_api.adapters.presenters.records_presenter import RecordsPresenter
from fiscal_dashboard_api.adapters.routers.base_router import BaseRouter
from fiscal_dashboard_api.adapters.schemas.http.envelopes import SuccessEnvelope
from fiscal_dashboard_api.adapters.schemas.http.records import (
    InvoiceIn,
    InvoiceOut,
    QuoteIn,
    QuoteOut,
    RecordDeletedOut,
    TransactionIn,
    TransactionOut,
)
from fiscal_dashboard_api.application.use_cases.records.save_financial_record import (
    DeleteFinancialRecord,
    SaveFinancialRecord,
)
from fiscal_dashboard_api.dependencies.dashboard import get_delete_record_uc, get_save_record_uc
from fiscal_dashboard_api.domain.entities.financial_records import FinancialRecord
from fiscal_dashboard_api.domain.enums.financial import RecordKind

invoices = BaseRouter(resource="invoices", tags=["Invoices"])
transactions = BaseRouter(resource="transactions", tags=["Transactions"])
quotes = BaseRouter(resource="quotes", tags=["Quotes"])

router = APIRouter()
presenter = RecordsPresenter()

UserDep = Annotated[int, Depends(require_user_id)]
SaveDep = Annotated[SaveFinancialRecord, Depends(get_save_record_uc)]
DeleteDep = Annotated[DeleteFinancialRecord, Depends(get_delete_record_uc)]
RecordId = Annotated[int, Path(ge=1)]

_WRITE_ERRORS = BaseRouter.std_error_responses(401, 404, 422, 503)


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def _save(
    uc: SaveFinancialRecord,
    record: FinancialRecord,
    request: Request,
    response: Response,
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    saved = await uc.execute(record)
    body: SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut] = BaseRouter.send(
        response, presenter.present_record(saved, trace_id=_trace_id(request))
    )
    return body


async def _delete(
    uc: DeleteFinancialRecord,
    kind: RecordKind,
    user_id: int,
    record_id: int,
    request: Request,
    response: Response,
) -> SuccessEnvelope[RecordDeletedOut]:
    await uc.execute(kind, user_id, record_id)
    body: SuccessEnvelope[RecordDeletedOut] = BaseRouter.send(
        response, presenter.present_deleted(record_id, trace_id=_trace_id(request))
    )
    return body


# --------------------------------------------------------------------------- #
# Invoices
# --------------------------------------------------------------------------- #


@invoices.post(
    "",
    response_model=SuccessEnvelope[InvoiceOut],
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
    summary="Create an invoice",
)
async def create_invoice(
    body: InvoiceIn, request: Request, response: Response, user_id: UserDep, uc: SaveDep
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    return await _save(uc, invoice_from_http(body, user_id=user_id), request, response)


@invoices.put(
    "/{record_id}",
    response_model=SuccessEnvelope[InvoiceOut],
    responses=_WRITE_ERRORS,
    summary="Replace an invoice",
)
async def update_invoice(
    record_id: RecordId,
    body: InvoiceIn,
    request: Request,
    response: Response,
    user_id: UserDep,
    uc: SaveDep,
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    record = invoice_from_http(body, user_id=user_id, record_id=record_id)
    return await _save(uc, record, request, response)


@invoices.delete(
    "/{record_id}",
    response_model=SuccessEnvelope[RecordDeletedOut],
    responses=_WRITE_ERRORS,
    summary="Delete an invoice",
)
async def delete_invoice(
    record_id: RecordId, request: Request, response: Response, user_id: UserDep, uc: DeleteDep
) -> SuccessEnvelope[RecordDeletedOut]:
    return await _delete(uc, RecordKind.INVOICE, user_id, record_id, request, response)


# --------------------------------------------------------------------------- #
# Transactions
# --------------------------------------------------------------------------- #


@transactions.post(
    "",
    response_model=SuccessEnvelope[TransactionOut],
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
    summary="Create a transaction",
)
async def create_transaction(
    body: TransactionIn, request: Request, response: Response, user_id: UserDep, uc: SaveDep
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    return await _save(uc, transaction_from_http(body, user_id=user_id), request, response)


@transactions.put(
    "/{record_id}",
    response_model=SuccessEnvelope[TransactionOut],
    responses=_WRITE_ERRORS,
    summary="Replace a transaction",
)
async def update_transaction(
    record_id: RecordId,
    body: TransactionIn,
    request: Request,
    response: Response,
    user_id: UserDep,
    uc: SaveDep,
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    record = transaction_from_http(body, user_id=user_id, record_id=record_id)
    return await _save(uc, record, request, response)


@transactions.delete(
    "/{record_id}",
    response_model=SuccessEnvelope[RecordDeletedOut],
    responses=_WRITE_ERRORS,
    summary="Delete a transaction",
)
async def delete_transaction(
    record_id: RecordId, request: Request, response: Response, user_id: UserDep, uc: DeleteDep
) -> SuccessEnvelope[RecordDeletedOut]:
    return await _delete(uc, RecordKind.TRANSACTION, user_id, record_id, request, response)


# --------------------------------------------------------------------------- #
# Quotes
# --------------------------------------------------------------------------- #


@quotes.post(
    "",
    response_model=SuccessEnvelope[QuoteOut],
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
    summary="Create a quote",
)
async def create_quote(
    body: QuoteIn, request: Request, response: Response, user_id: UserDep, uc: SaveDep
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    return await _save(uc, quote_from_http(body, user_id=user_id), request, response)


@quotes.put(
    "/{record_id}",
    response_model=SuccessEnvelope[QuoteOut],
    responses=_WRITE_ERRORS,
    summary="Replace a quote",
)
async def update_quote(
    record_id: RecordId,
    body: QuoteIn,
    request: Request,
    response: Response,
    user_id: UserDep,
    uc: SaveDep,
) -> SuccessEnvelope[InvoiceOut | TransactionOut | QuoteOut]:
    record = quote_from_http(body, user_id=user_id, record_id=record_id)
    return await _save(uc, record, request, response)


@quotes.delete(
    "/{record_id}",
    response_model=SuccessEnvelope[RecordDeletedOut],
    responses=_WRITE_ERRORS,
    summary="Delete a quote",
)
async def delete_quote(
    record_id: RecordId, request: Request, response: Response, user_id: UserDep, uc: DeleteDep
) -> SuccessEnvelope[RecordDeletedOut]:
    return await _delete(uc, RecordKind.QUOTE, user_id, record_id, request, response)


router.include_router(invoices)
router.include_router(transactions)
router.include_router(quotes)
