# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dashboard DTOs (Application Layer).

Purpose:
    Results returned by the dashboard use cases to the adapters layer.

Layer: application/schemas/dto
"""

from __future__ import annotations

from pydantic import Field

from fiscal_dashboard_api.application.schemas.dto.base import BaseDTO
from fiscal_dashboard_api.domain.entities.dashboard_summary import DashboardSummary


class DashboardReportDTO(BaseDTO):
    """Summary plus the request context echoed to clients."""

    summary: DashboardSummary = Field(description="Aggregated figures (rounded).")
    year: str = Field(description="Applied year, or 'all' for all-time views.")
    period: str = Field(description="Applied period selector.")
    was_filtered: bool = Field(description="Whether the caller supplied year or period.")
    cache_hit: bool = Field(default=False, description="Served from the result cache.")
    error: bool = Field(default=False, description="Zeroed fallback after a backend failure.")


class CacheClearResultDTO(BaseDTO):
    """Outcome of a per-user cache invalidation."""

    user_id: int
    entries_deleted: int = Field(ge=0)
