# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Stats Router.

Summary:
    ``GET /api/stats/dashboard`` returns the caller's fiscal dashboard for a
    year/period window. The endpoint always answers 200 to an identified
    caller: query values are never rejected, and backend failures are
    reported through ``filter.error`` on a zeroed summary.

    ``POST /api/stats/dashboard-cached/clear`` drops the caller's cached
    summaries.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request, Response, status

from fiscal_dashboard_api.adapters.deps.identity import require_user_id
from fiscal_dashboard_api.adapters.presenters.dashboard_presenter import DashboardPresenter
from fiscal_dashboard_api.adapters.routers.base_router import BaseRouter
from fiscal_dashboard_api.adapters.schemas.http.dashboard import (
    CacheClearHTTP,
    DashboardSummaryHTTP,
)
from fiscal_dashboard_api.application.use_cases.dashboard.clear_dashboard_cache import (
    ClearDashboardCache,
)
from fiscal_dashboard_api.application.use_cases.dashboard.get_dashboard_summary import (
    GetDashboardSummary,
)
from fiscal_dashboard_api.dependencies.dashboard import (
    get_clear_dashboard_cache_uc,
    get_dashboard_summary_uc,
)

router = BaseRouter(resource="stats", tags=["Dashboard"])
presenter = DashboardPresenter()


def _is_true(flag: str | None) -> bool:
    """Query flags are on only for a literal ``true`` (any case)."""
    return (flag or "").strip().lower() == "true"


@router.get(
    "/dashboard",
    response_model=DashboardSummaryHTTP,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(401),
    summary="Get the fiscal dashboard summary",
)
async def get_dashboard(
    request: Request,
    response: Response,
    user_id: Annotated[int, Depends(require_user_id)],
    uc: Annotated[GetDashboardSummary, Depends(get_dashboard_summary_uc)],
    year: Annotated[
        str | None,
        Query(description="YYYY, or 'all' for all-time. Defaults to the current year."),
    ] = None,
    period: Annotated[
        str | None,
        Query(description="'all', 'q1'..'q4' or 'm1'..'m12'. Defaults to 'all'."),
    ] = None,
    force_refresh: Annotated[
        str | None,
        Query(alias="forceRefresh", description="'true' bypasses the result cache."),
    ] = None,
    timestamp: Annotated[
        str | None,
        Query(description="Client cache-buster in any format; ignored by the server."),
    ] = None,
) -> DashboardSummaryHTTP:
    report = await uc.execute(
        user_id,
        year=year,
        period=period,
        force_refresh=_is_true(force_refresh),
    )
    result = presenter.present_summary(report, trace_id=getattr(request.state, "request_id", None))
    body: DashboardSummaryHTTP = BaseRouter.send(response, result)
    return body


@router.post(
    "/dashboard-cached/clear",
    response_model=CacheClearHTTP,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(401),
    summary="Clear the caller's cached dashboard summaries",
)
async def clear_dashboard_cache(
    response: Response,
    user_id: Annotated[int, Depends(require_user_id)],
    uc: Annotated[ClearDashboardCache, Depends(get_clear_dashboard_cache_uc)],
) -> CacheClearHTTP:
    dto = await uc.execute(user_id)
    body: CacheClearHTTP = BaseRouter.send(response, presenter.present_cache_clear(dto))
    return body
