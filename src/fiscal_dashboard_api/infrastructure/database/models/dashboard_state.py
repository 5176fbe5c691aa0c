# src/fiscal_dashboard_api/infrastructure/database/models/dashboard_state.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dashboard State Models.

Purpose:
    ``dashboard_state`` holds one change marker per user (``updated_at`` in
    epoch milliseconds, ``BIGINT``). ``dashboard_events`` keeps the history of
    touches for diagnostics and the events endpoint.

Layer:
    infrastructure
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_dashboard_api.infrastructure.database.models.base import (
    Base,
    IdType,
    JSONType,
    ReprMixin,
)


class DashboardStateModel(Base, ReprMixin):
    """Per-user dashboard change marker."""

    __tablename__ = "dashboard_state"

    user_id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=False)
    last_event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class DashboardEventModel(Base, ReprMixin):
    """One recorded dashboard state change."""

    __tablename__ = "dashboard_events"
    __table_args__ = (Index("ix_dashboard_events_user_id_created_at", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(IdType, nullable=False)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
