# src/fiscal_dashboard_api/infrastructure/middleware/request_metrics.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Request latency middleware (Prometheus).

Measures server-side request latency into
``http_server_request_duration_seconds{method,handler,status}``. The handler
label prefers the templated route path so ids do not explode cardinality.
Errors in metrics code never impact request flow.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fiscal_dashboard_api.infrastructure.observability.metrics import (
    get_http_server_request_duration_seconds,
)

__all__ = ["RequestLatencyMiddleware"]

logger = logging.getLogger(__name__)


class RequestLatencyMiddleware(BaseHTTPMiddleware):
    """Record request latency to Prometheus."""

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._prom_hist = get_http_server_request_duration_seconds()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start
            route_obj = request.scope.get("route")
            handler = getattr(route_obj, "path_format", None) or getattr(route_obj, "path", None)
            try:
                self._prom_hist.labels(
                    request.method.upper(), handler or "unmatched", str(status_code)
                ).observe(duration)
            except Exception:
                logger.debug("prom.histogram_observe_failed", exc_info=True)
