# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Canonical APIRouter wrapper and shared utilities for HTTP endpoints:
      - Stable prefixes under ``/api`` (e.g. ``/api/invoices``).
      - Standard error response mapping using ErrorEnvelope.
      - Helper to emit presenter results with headers.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from fastapi import APIRouter, Response

from fiscal_dashboard_api.adapters.presenters.base_presenter import PresentResult
from fiscal_dashboard_api.adapters.schemas.http.envelopes import ErrorEnvelope
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


class BaseRouter(APIRouter):
    """Canonical router wrapper for API endpoints.

    Args:
        resource: Path segment under ``/api`` (e.g. ``"invoices"``).
        prefix: Optional explicit prefix (overrides ``/api/{resource}``).
        tags: Default tags applied to all routes mounted on this router.
        **kwargs: Additional APIRouter kwargs.
    """

    API_ROOT = "/api"

    def __init__(
        self,
        *,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"{self.API_ROOT}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            **kwargs,
        )
        _LOGGER.debug(
            "router_initialized",
            extra={"prefix": computed_prefix, "tags": [str(t) for t in tags or []]},
        )

    @staticmethod
    def send(response: Response, result: PresentResult[Any]) -> Any:
        """Apply presenter headers/status to ``response`` and return the body."""
        response.headers.update(dict(result.headers))
        if result.status_code is not None:
            response.status_code = result.status_code
        return result.body

    @staticmethod
    def std_error_responses(*codes: int) -> dict[int | str, dict[str, Any]]:
        """Return OpenAPI error responses (ErrorEnvelope) for ``codes``.

        Defaults to 401, 422 and 500 when no codes are given.
        """
        described = {
            401: "Missing or invalid X-User-Id.",
            404: "Not found.",
            422: "Unprocessable content.",
            500: "Internal server error.",
            503: "Storage unavailable.",
        }
        wanted = codes or (401, 422, 500)
        return {c: {"model": ErrorEnvelope, "description": described[c]} for c in wanted}
