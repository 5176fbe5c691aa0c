# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Period Filter (Domain Service)

Purpose:
    Classify record dates into (year, quarter, month) and decide whether a
    record belongs to the requested reporting window.

Notes:
    Unrecognized period selectors exclude everything, so a typo never shows
    data for an unintended window.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol

from fiscal_dashboard_api.domain.entities.period import PeriodSpec

__all__ = ["DatedRecord", "filter_records", "include_in_period", "quarter_of"]


class DatedRecord(Protocol):
    """Anything with a date used for period classification."""

    @property
    def record_date(self) -> date | None: ...


def quarter_of(day: date) -> int:
    """Return the calendar quarter (1..4) of ``day``."""
    return (day.month - 1) // 3 + 1


def include_in_period(day: date | None, spec: PeriodSpec) -> bool:
    """Decide whether ``day`` falls inside ``spec``.

    Args:
        day: Record date; records without one are excluded.
        spec: Requested reporting window.

    Returns:
        True when the date matches the year (if any) and the period selector.
    """
    if day is None:
        return False
    if spec.year is not None and day.year != spec.year:
        return False

    granularity = spec.granularity
    if granularity == "all":
        return True
    if granularity == "quarter":
        return quarter_of(day) == spec.quarter
    if granularity == "month":
        return day.month == spec.month

    return False


def filter_records[R: DatedRecord](records: Iterable[R], spec: PeriodSpec) -> list[R]:
    """Return the records whose date falls inside ``spec``, preserving order."""
    if spec.granularity == "unknown":
        return []
    return [r for r in records if include_in_period(r.record_date, spec)]
