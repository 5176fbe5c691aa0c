# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dashboard State Notifier (Application Service).

Synopsis:
    Polling-based change notification. Write paths ``touch`` the caller's
    state row; dashboard clients poll ``read`` and refetch the summary with
    ``forceRefresh`` whenever ``updated_at`` advances.

Guarantees:
    * ``touch`` is a single atomic upsert at the storage layer and always
      advances ``updated_at``; ``last_event_type`` is last-write-wins.
    * ``read`` lazily creates the row with ``last_event_type = "initial"``.

Layer:
    application/services
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from fiscal_dashboard_api.application.interfaces.dashboard_state_port import (
    DashboardStateRepository,
)
from fiscal_dashboard_api.domain.entities.dashboard_state import (
    INITIAL_EVENT,
    DashboardEvent,
    DashboardState,
)
from fiscal_dashboard_api.domain.exceptions.dashboard import InvalidUserError
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

__all__ = ["DashboardStateNotifier", "epoch_ms"]

logger = get_json_logger(__name__)


def epoch_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def _require_user(user_id: int) -> None:
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise InvalidUserError("user id must be a positive integer", details={"user_id": user_id})


class DashboardStateNotifier:
    """Touch/read facade over the dashboard state repository.

    Args:
        repository: Storage for state rows and event history.
        clock: Epoch-milliseconds clock; injectable for tests.
    """

    def __init__(
        self,
        repository: DashboardStateRepository,
        *,
        clock: Callable[[], int] = epoch_ms,
    ) -> None:
        self._repo = repository
        self._clock = clock

    async def touch(
        self,
        user_id: int,
        event_type: str,
        *,
        data: Mapping[str, Any] | None = None,
    ) -> DashboardState:
        """Record that ``user_id``'s financial data changed.

        Args:
            user_id: Owner of the changed records.
            event_type: Change label, e.g. ``invoice-created``.
            data: Optional context stored with the history event.

        Returns:
            The updated state.

        Raises:
            InvalidUserError: If ``user_id`` is not a positive integer.
            ValueError: If ``event_type`` is blank.
        """
        _require_user(user_id)
        if not event_type or not event_type.strip():
            raise ValueError("event_type must be non-empty")

        state = await self._repo.touch(user_id, event_type, now_ms=self._clock())
        await self._repo.append_event(user_id, event_type, at_ms=state.updated_at, data=data)
        logger.info(
            "dashboard_state_touched",
            extra={
                "user_id": user_id,
                "event_type": event_type,
                "updated_at": state.updated_at,
            },
        )
        return state

    async def read(self, user_id: int) -> DashboardState:
        """Return the user's state, creating it on first access."""
        _require_user(user_id)
        return await self._repo.get_or_create(
            user_id,
            now_ms=self._clock(),
            initial_event=INITIAL_EVENT,
        )

    async def recent_events(self, user_id: int, *, limit: int = 50) -> Sequence[DashboardEvent]:
        """Return the user's latest state changes, newest first."""
        _require_user(user_id)
        return await self._repo.list_events(user_id, limit=max(1, limit))
