# src/fiscal_dashboard_api/infrastructure/http/errors.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Exception handlers rendering ``ErrorEnvelope`` payloads.

Registered in ``create_app``:
    * ``DomainError``            → its own ``code`` / ``http_status``.
    * ``RequestValidationError`` → 422 ``VALIDATION_ERROR``.
    * ``HTTPException``          → its status, ``HTTP_ERROR``.
    * ``Exception``              → 500 ``INTERNAL_ERROR``.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from fiscal_dashboard_api.domain.exceptions.base import DomainError
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
        "details": details or {},
    }
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def _response(request: Request, status_code: int, payload: dict[str, Any]) -> JSONResponse:
    headers = {"X-Request-ID": tid} if (tid := _trace_id(request)) else None
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload), headers=headers)


async def handle_domain_error(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, DomainError)
    level = logger.error if exc.http_status >= 500 else logger.info
    level(
        "domain_error",
        extra={"code": exc.code, "http_status": exc.http_status, "path": request.url.path},
    )
    payload = error_envelope(
        code=exc.code,
        http_status=exc.http_status,
        message=exc.message or exc.code,
        details=dict(exc.details or {}),
        trace_id=_trace_id(request),
    )
    return _response(request, exc.http_status, payload)


async def handle_validation_error(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, RequestValidationError)
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": exc.errors()},
        trace_id=_trace_id(request),
    )
    return _response(request, 422, payload)


async def handle_http_exception(request: Request, exc: Exception) -> Response:
    assert isinstance(exc, StarletteHTTPException)
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return _response(request, exc.status_code, payload)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception(
        "unhandled_exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return _response(request, 500, payload)
