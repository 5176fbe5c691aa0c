# src/fiscal_dashboard_api/adapters/repositories/base_repository.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared mechanics for SQLAlchemy repositories.

Purpose:
      * Deterministic ordering helpers (NULLS LAST + PK tie-breakers).
      * Safe fetch helpers (optional, all).
      * Translation of driver failures into ``StorageUnavailableError``.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Write methods commit so that concurrent requests observe their effects.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, nulls_last
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_dashboard_api.domain.exceptions.dashboard import StorageUnavailableError
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

TModel = TypeVar("TModel")

logger = get_json_logger(__name__)


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Base class for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session

    @property
    def dialect_name(self) -> str:
        """Name of the bound dialect, e.g. ``postgresql`` or ``sqlite``."""
        bind = self._session.get_bind()
        return bind.dialect.name

    # ------------------------------------------------------------------
    # Deterministic ordering utilities
    # ------------------------------------------------------------------

    @staticmethod
    def order_by_latest(
        stmt: Select[Any],
        timestamp_col: Any,
        pk_col: Any,
    ) -> Select[Any]:
        """Apply latest-first ordering: ``timestamp DESC NULLS LAST, pk DESC``."""
        return stmt.order_by(
            nulls_last(timestamp_col.desc()),
            pk_col.desc(),
        )

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute a statement and return zero or one row."""
        res = await self._session.execute(stmt)
        return res.scalars().first()

    async def fetch_all(self, stmt: Select[Any]) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    # ------------------------------------------------------------------
    # Error translation
    # ------------------------------------------------------------------

    @contextmanager
    def storage_guard(self, operation: str, **context: Any) -> Iterator[None]:
        """Re-raise driver and connection failures as ``StorageUnavailableError``.

        Integrity and programming errors are translated too: from the caller's
        point of view the store could not complete the operation.
        """
        try:
            yield
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "storage_operation_failed",
                extra={"operation": operation, "error_type": type(exc).__name__, **context},
            )
            raise StorageUnavailableError(
                f"storage failed during {operation}",
                details={"operation": operation},
            ) from exc
