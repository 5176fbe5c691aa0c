# src/fiscal_dashboard_api/infrastructure/database/models/base.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Declarative Base and shared persistence helpers.

This module defines:
    - The project-wide SQLAlchemy Declarative Base with deterministic naming
      conventions and an optional schema taken from Settings.
    - ``ReprMixin`` for concise debug output of ORM rows.
    - ``JSONType``: JSONB on PostgreSQL, generic JSON elsewhere (SQLite).
"""

from __future__ import annotations

from sqlalchemy import JSON, BigInteger, Integer, MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

from fiscal_dashboard_api.config.settings import get_settings

__all__ = ["metadata", "Base", "ReprMixin", "JSONType", "IdType", "NAMING_CONVENTIONS"]

#: Database schema for all tables; ``None`` uses the connection default.
DEFAULT_DB_SCHEMA: str | None = get_settings().db_schema

#: Deterministic constraint names.
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS, schema=DEFAULT_DB_SCHEMA)

#: JSONB on PostgreSQL, JSON text on other dialects.
JSONType = JSON().with_variant(JSONB(), "postgresql")

#: Autoincrementing surrogate key; BIGINT on PostgreSQL, INTEGER (rowid) on SQLite.
IdType = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """Declarative Base for all ORM models; the schema comes from ``metadata``."""

    metadata = metadata


class ReprMixin:
    """Mixin providing a concise, column-based ``__repr__``."""

    def __repr__(self) -> str:
        cols = self.__table__.columns  # type: ignore[attr-defined]
        attrs = [f"{c.key}={getattr(self, c.key, None)!r}" for c in cols if c.key != "additional_taxes"]
        return f"{type(self).__name__}({', '.join(attrs)})"
