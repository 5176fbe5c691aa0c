# src/fiscal_dashboard_api/main.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and all
    routers. Provides an application factory (`create_app`) and a module-level
    eager app (`app`) for uvicorn and tests.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes DB/Redis/dashboard cache and tears them down safely.
    • Observability:
        - Root JSON logging configured at import time.
        - Request id and latency middleware installed for every request.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from fiscal_dashboard_api.adapters.routers import (
    dashboard_status_router,
    health_router,
    metrics_router,
    records_router,
    stats_router,
)
from fiscal_dashboard_api.config.settings import Settings, get_settings
from fiscal_dashboard_api.dependencies.core.bootstrap import bootstrap
from fiscal_dashboard_api.domain.exceptions.base import DomainError
from fiscal_dashboard_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from fiscal_dashboard_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from fiscal_dashboard_api.infrastructure.middleware.request_id import RequestIdMiddleware
from fiscal_dashboard_api.infrastructure.middleware.request_metrics import (
    RequestLatencyMiddleware,
)

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__api_stats_dashboard``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and tear down shared infrastructure via the core bootstrap.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to FastAPI to serve requests.
    """
    async with bootstrap(app) as state:
        app.state.settings = state.settings
        yield


def _attach_middlewares(app: FastAPI, settings: Settings) -> None:
    """Attach core middleware.

    Starlette runs the last-added middleware first, so CORS wraps everything
    and the request id is bound before latency is measured.
    """
    app.add_middleware(RequestLatencyMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or ["*"],
        allow_credentials=bool(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag", "X-Request-ID", "X-Dashboard-Cache"],
    )


def _register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------
def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Fiscal Dashboard API",
        version=settings.service_version,
        description="Per-user fiscal dashboard over invoices, transactions and quotes.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
    )

    _register_exception_handlers(app)
    _attach_middlewares(app, settings)

    app.include_router(stats_router.router)
    app.include_router(dashboard_status_router.router)
    app.include_router(records_router.router)
    app.include_router(health_router.router)
    app.include_router(metrics_router.router)

    logger.info(
        "service_startup",
        extra={
            "service": "fiscal-dashboard-api",
            "version": settings.service_version,
            "environment": settings.environment.value,
        },
    )
    return app


app = create_app()
