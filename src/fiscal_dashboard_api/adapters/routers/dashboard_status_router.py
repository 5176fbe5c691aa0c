# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Dashboard Status Router.

Summary:
    Polling contract for dashboard clients:
      * ``GET  /api/dashboard-status``         → ``{updated_at, lastEvent}``.
      * ``POST /api/dashboard-status/touch``   → manual update, returns the new state.
      * ``GET  /api/dashboard-status/events``  → recent change history.

    Clients refetch the summary with ``forceRefresh=true`` whenever
    ``updated_at`` advances.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Body, Depends, Query, Request, Response, status

from fiscal_dashboard_api.adapters.deps.identity import require_user_id
from fiscal_dashboard_api.adapters.presenters.dashboard_presenter import DashboardPresenter
from fiscal_dashboard_api.adapters.routers.base_router import BaseRouter
from fiscal_dashboard_api.adapters.schemas.http.dashboard import (
    DashboardEventHTTP,
    DashboardStatusHTTP,
    TouchRequest,
)
from fiscal_dashboard_api.adapters.schemas.http.envelopes import SuccessEnvelope
from fiscal_dashboard_api.application.use_cases.dashboard.dashboard_status import (
    GetDashboardStatus,
    ListDashboardEvents,
    TouchDashboardStatus,
)
from fiscal_dashboard_api.dependencies.dashboard import (
    get_dashboard_status_uc,
    get_list_dashboard_events_uc,
    get_touch_dashboard_status_uc,
)

router = BaseRouter(resource="dashboard-status", tags=["Dashboard"])
presenter = DashboardPresenter()


@router.get(
    "",
    response_model=DashboardStatusHTTP,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(401),
    summary="Get the dashboard change marker",
)
async def get_dashboard_status(
    response: Response,
    user_id: Annotated[int, Depends(require_user_id)],
    uc: Annotated[GetDashboardStatus, Depends(get_dashboard_status_uc)],
) -> DashboardStatusHTTP:
    state = await uc.execute(user_id)
    body: DashboardStatusHTTP = BaseRouter.send(response, presenter.present_status(state))
    return body


@router.post(
    "/touch",
    response_model=DashboardStatusHTTP,
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(401, 422, 503),
    summary="Advance the dashboard change marker",
)
async def touch_dashboard_status(
    response: Response,
    user_id: Annotated[int, Depends(require_user_id)],
    uc: Annotated[TouchDashboardStatus, Depends(get_touch_dashboard_status_uc)],
    payload: Annotated[TouchRequest | None, Body()] = None,
) -> DashboardStatusHTTP:
    req = payload or TouchRequest()
    state = await uc.execute(user_id, event_type=req.event_type, data=req.data)
    body: DashboardStatusHTTP = BaseRouter.send(response, presenter.present_status(state))
    return body


@router.get(
    "/events",
    response_model=SuccessEnvelope[list[DashboardEventHTTP]],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(401, 422, 503),
    summary="List recent dashboard changes",
)
async def list_dashboard_events(
    request: Request,
    response: Response,
    user_id: Annotated[int, Depends(require_user_id)],
    uc: Annotated[ListDashboardEvents, Depends(get_list_dashboard_events_uc)],
    limit: Annotated[int | None, Query(ge=1, le=200)] = None,
) -> SuccessEnvelope[list[DashboardEventHTTP]]:
    events = await uc.execute(user_id, limit=limit)
    result = presenter.present_events(events, trace_id=getattr(request.state, "request_id", None))
    body: SuccessEnvelope[list[DashboardEventHTTP]] = BaseRouter.send(response, result)
    return body
