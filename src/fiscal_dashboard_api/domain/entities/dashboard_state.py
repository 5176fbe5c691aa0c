# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Dashboard State Entities

Purpose:
    Per-user change marker polled by dashboard clients, and the append-only
    history of the events that moved it.

Layer: domain/entities
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from .base import BaseEntity

#: Event type assigned when the state row is created by a first poll.
INITIAL_EVENT: Final[str] = "initial"

#: Event type reported when the state cannot be read from storage.
ERROR_RECOVERY_EVENT: Final[str] = "error-recovery"

#: Event type used by the manual refresh endpoint.
MANUAL_UPDATE_EVENT: Final[str] = "manual-update"


@dataclass(frozen=True, slots=True)
class DashboardState(BaseEntity):
    """Latest change marker for a user.

    Args:
        user_id: Owner of the dashboard.
        last_event_type: Label of the most recent change (e.g. ``invoice-created``).
        updated_at: Epoch milliseconds of the most recent change.
    """

    user_id: int
    last_event_type: str
    updated_at: int

    def __post_init__(self) -> None:
        if self.user_id <= 0:
            raise ValueError("user_id must be positive")
        if not self.last_event_type:
            raise ValueError("last_event_type must be non-empty")
        if self.updated_at < 0:
            raise ValueError("updated_at must be >= 0")


@dataclass(frozen=True, slots=True)
class DashboardEvent(BaseEntity):
    """One recorded state change."""

    id: int | None
    user_id: int
    event_type: str
    created_at: int
    data: Mapping[str, Any] | None = field(default=None, compare=False)
