# src/fiscal_dashboard_api/adapters/repositories/dashboard_state_repository.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Dashboard State Repository (SQLAlchemy).

Purpose:
    Concrete implementation of the ``DashboardStateRepository`` port.

Layer:
    adapters

Notes:
    ``touch`` is a single ``INSERT .. ON CONFLICT DO UPDATE .. RETURNING``
    statement on PostgreSQL and SQLite, so concurrent touches for the same
    user never lose the row and ``updated_at`` strictly increases:

        updated_at = CASE WHEN excluded.updated_at > updated_at
                          THEN excluded.updated_at
                          ELSE updated_at + 1 END
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import case, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_dashboard_api.adapters.repositories.base_repository import BaseRepository
from fiscal_dashboard_api.domain.entities.dashboard_state import DashboardEvent, DashboardState
from fiscal_dashboard_api.infrastructure.database.models.dashboard_state import (
    DashboardEventModel,
    DashboardStateModel,
)

_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class DashboardStateRepository(BaseRepository[DashboardStateModel]):
    """SQLAlchemy-backed storage for dashboard state rows and events."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    def _insert(self) -> Any:
        insert = _INSERTS.get(self.dialect_name)
        if insert is None:
            raise NotImplementedError(f"upsert not supported on dialect {self.dialect_name!r}")
        return insert(DashboardStateModel)

    @staticmethod
    def _to_state(row: Any) -> DashboardState:
        return DashboardState(
            user_id=row.user_id,
            last_event_type=row.last_event_type,
            updated_at=int(row.updated_at),
        )

    async def touch(self, user_id: int, event_type: str, *, now_ms: int) -> DashboardState:
        """Atomically upsert the user's marker and return the stored values."""
        table = DashboardStateModel
        stmt = self._insert().values(user_id=user_id, last_event_type=event_type, updated_at=now_ms)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.user_id],
            set_={
                "last_event_type": stmt.excluded.last_event_type,
                "updated_at": case(
                    (stmt.excluded.updated_at > table.updated_at, stmt.excluded.updated_at),
                    else_=table.updated_at + 1,
                ),
            },
        ).returning(table.user_id, table.last_event_type, table.updated_at)

        with self.storage_guard("dashboard_state_touch", user_id=user_id):
            result = await self._session.execute(stmt)
            row = result.one()
            await self._session.commit()
        return self._to_state(row)

    async def get_or_create(
        self,
        user_id: int,
        *,
        now_ms: int,
        initial_event: str,
    ) -> DashboardState:
        """Return the user's marker, inserting ``initial_event`` when absent."""
        insert_stmt = (
            self._insert()
            .values(user_id=user_id, last_event_type=initial_event, updated_at=now_ms)
            .on_conflict_do_nothing(index_elements=[DashboardStateModel.user_id])
        )
        select_stmt = select(DashboardStateModel).where(DashboardStateModel.user_id == user_id)

        with self.storage_guard("dashboard_state_read", user_id=user_id):
            await self._session.execute(insert_stmt)
            await self._session.commit()
            row = await self.fetch_optional(select_stmt)
        if row is None:
            raise RuntimeError(f"dashboard_state row missing after insert for user {user_id}")
        return self._to_state(row)

    async def append_event(
        self,
        user_id: int,
        event_type: str,
        *,
        at_ms: int,
        data: Mapping[str, Any] | None = None,
    ) -> DashboardEvent:
        row = DashboardEventModel(
            user_id=user_id,
            event_type=event_type,
            created_at=at_ms,
            data=dict(data) if data is not None else None,
        )
        with self.storage_guard("dashboard_event_append", user_id=user_id):
            self._session.add(row)
            await self._session.flush()
            await self._session.commit()
        return DashboardEvent(
            id=row.id,
            user_id=row.user_id,
            event_type=row.event_type,
            created_at=row.created_at,
            data=row.data,
        )

    async def list_events(self, user_id: int, *, limit: int) -> Sequence[DashboardEvent]:
        stmt = self.order_by_latest(
            select(DashboardEventModel).where(DashboardEventModel.user_id == user_id),
            DashboardEventModel.created_at,
            DashboardEventModel.id,
        ).limit(limit)
        with self.storage_guard("dashboard_event_list", user_id=user_id):
            rows = await self.fetch_all(stmt)
        return [
            DashboardEvent(
                id=r.id,
                user_id=r.user_id,
                event_type=r.event_type,
                created_at=r.created_at,
                data=r.data,
            )
            for r in rows
        ]
