# src/fiscal_dashboard_api/adapters/routers/metrics_router.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Warms lazily created collectors so their series appear on the very first
scrape (cold start).

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from fiscal_dashboard_api.infrastructure.observability.metrics import (
    get_dashboard_cache_operations_total,
    get_dashboard_compute_duration_seconds,
    get_http_server_request_duration_seconds,
)

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in text format."""
    get_dashboard_cache_operations_total()
    get_dashboard_compute_duration_seconds()
    get_http_server_request_duration_seconds()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
