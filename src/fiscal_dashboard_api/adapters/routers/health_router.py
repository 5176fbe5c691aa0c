# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    ``GET /healthz`` liveness signal plus a ``db`` check (``SELECT 1`` on the
    request session). Returns 503 with ``status = "degraded"`` when the
    database is unreachable.
"""

from __future__ import annotations

import time
import typing as t

from fastapi import APIRouter, Response, status
from pydantic import Field
from sqlalchemy import text

from fiscal_dashboard_api.adapters.schemas.http.base import BaseHTTPSchema
from fiscal_dashboard_api.dependencies.dashboard import SessionDep
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)
router = APIRouter()


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check."""

    name: str = Field(..., examples=["db"])
    status: t.Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class HealthResponse(BaseHTTPSchema):
    """Aggregated health response."""

    status: t.Literal["ok", "degraded"]
    checks: list[CheckResult] = Field(default_factory=list)


@router.get(
    "/healthz",
    summary="Health",
    operation_id="health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def healthz(response: Response, session: SessionDep) -> HealthResponse:
    start = time.perf_counter()
    detail: str | None = None
    try:
        await session.execute(text("SELECT 1"))
        ok = True
    except Exception as exc:
        ok = False
        detail = type(exc).__name__
        logger.warning("health_db_check_failed", extra={"error_type": detail})
    check = CheckResult(
        name="db",
        status="ok" if ok else "down",
        detail=detail,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )
    if not ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="ok" if ok else "degraded", checks=[check])


