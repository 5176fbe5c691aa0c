# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Use Cases: Dashboard Status

Purpose:
    Read, touch and list the change marker clients poll to decide when to
    refetch the dashboard.

Failure policy:
    ``GetDashboardStatus`` never fails on storage errors: it logs and answers
    with ``last_event_type = "error-recovery"`` and the current time, which
    makes pollers refetch.

Layer: application/use_cases
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fiscal_dashboard_api.application.services.dashboard_notifier import (
    DashboardStateNotifier,
    epoch_ms,
)
from fiscal_dashboard_api.domain.entities.dashboard_state import (
    ERROR_RECOVERY_EVENT,
    MANUAL_UPDATE_EVENT,
    DashboardEvent,
    DashboardState,
)
from fiscal_dashboard_api.domain.exceptions.dashboard import InvalidUserError
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class GetDashboardStatus:
    """Return the caller's change marker, creating it on first poll."""

    def __init__(self, notifier: DashboardStateNotifier) -> None:
        self._notifier = notifier

    async def execute(self, user_id: int) -> DashboardState:
        try:
            return await self._notifier.read(user_id)
        except InvalidUserError:
            raise
        except Exception:
            logger.exception("dashboard_status_read_failed", extra={"user_id": user_id})
            return DashboardState(
                user_id=user_id,
                last_event_type=ERROR_RECOVERY_EVENT,
                updated_at=epoch_ms(),
            )


class TouchDashboardStatus:
    """Explicitly advance the caller's change marker (manual refresh)."""

    def __init__(self, notifier: DashboardStateNotifier) -> None:
        self._notifier = notifier

    async def execute(
        self,
        user_id: int,
        *,
        event_type: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> DashboardState:
        """Touch with ``event_type`` (default ``manual-update``).

        Raises:
            InvalidUserError: If ``user_id`` is not a positive integer.
            StorageUnavailableError: If the marker could not be written.
        """
        label = (event_type or "").strip() or MANUAL_UPDATE_EVENT
        return await self._notifier.touch(user_id, label, data=data)


class ListDashboardEvents:
    """Return the caller's recent change history, newest first."""

    def __init__(self, notifier: DashboardStateNotifier, *, max_limit: int = 50) -> None:
        self._notifier = notifier
        self._max_limit = max_limit

    async def execute(self, user_id: int, *, limit: int | None = None) -> Sequence[DashboardEvent]:
        effective = min(limit or self._max_limit, self._max_limit)
        return await self._notifier.recent_events(user_id, limit=effective)
