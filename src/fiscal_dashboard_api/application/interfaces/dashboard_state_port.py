# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Dashboard State Repository.

Synopsis:
    Persistence contract for the per-user dashboard change marker and its
    event history.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from fiscal_dashboard_api.domain.entities.dashboard_state import DashboardEvent, DashboardState


class DashboardStateRepository(Protocol):
    """Atomic access to ``dashboard_state`` rows and ``dashboard_events``."""

    async def touch(self, user_id: int, event_type: str, *, now_ms: int) -> DashboardState:
        """Upsert the user's row in a single statement.

        The stored ``updated_at`` becomes ``max(now_ms, previous + 1)`` so that
        every touch is observable by pollers.
        """
        ...

    async def get_or_create(
        self,
        user_id: int,
        *,
        now_ms: int,
        initial_event: str,
    ) -> DashboardState:
        """Return the user's row, inserting ``initial_event`` when absent."""
        ...

    async def append_event(
        self,
        user_id: int,
        event_type: str,
        *,
        at_ms: int,
        data: Mapping[str, Any] | None = None,
    ) -> DashboardEvent:
        """Record a state change in the history table."""
        ...

    async def list_events(self, user_id: int, *, limit: int) -> Sequence[DashboardEvent]:
        """Return the user's most recent events, newest first."""
        ...
