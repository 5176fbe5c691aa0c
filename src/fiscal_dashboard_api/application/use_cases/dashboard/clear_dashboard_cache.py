# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Use Case: Clear Dashboard Cache

Purpose:
    Drop every cached dashboard summary of the caller so the next request
    recomputes from storage.

Layer: application/use_cases
"""

from __future__ import annotations

from fiscal_dashboard_api.application.schemas.dto.dashboard import CacheClearResultDTO
from fiscal_dashboard_api.application.services.result_cache import DashboardResultCache
from fiscal_dashboard_api.domain.exceptions.dashboard import InvalidUserError


class ClearDashboardCache:
    """Per-user cache invalidation."""

    def __init__(self, cache: DashboardResultCache) -> None:
        self._cache = cache

    async def execute(self, user_id: int) -> CacheClearResultDTO:
        """Clear the caller's entries and report how many were removed.

        Raises:
            InvalidUserError: If ``user_id`` is not a positive integer.
        """
        if user_id <= 0:
            raise InvalidUserError("user id must be a positive integer", details={"user_id": user_id})
        deleted = await self._cache.clear_user(user_id)
        return CacheClearResultDTO(user_id=user_id, entries_deleted=deleted)
