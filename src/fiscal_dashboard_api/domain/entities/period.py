# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Reporting Period

Purpose:
    Value object describing the reporting window requested by a dashboard
    client: an optional calendar year plus ``all``, a quarter (``q1``..``q4``)
    or a month (``m1``..``m12``).

Layer: domain/entities
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Literal

from .base import BaseEntity

ALL_PERIODS: Final[str] = "all"

#: Period selectors offered to clients, in display order.
PERIOD_OPTIONS: Final[tuple[str, ...]] = (
    ALL_PERIODS,
    *(f"q{n}" for n in range(1, 5)),
    *(f"m{n}" for n in range(1, 13)),
)

_QUARTER_RE: Final[re.Pattern[str]] = re.compile(r"^q([1-4])$", re.IGNORECASE)
_MONTH_RE: Final[re.Pattern[str]] = re.compile(r"^m(1[0-2]|[1-9])$", re.IGNORECASE)

type PeriodGranularity = Literal["all", "quarter", "month", "unknown"]


@dataclass(frozen=True, slots=True)
class PeriodSpec(BaseEntity):
    """Requested reporting window.

    Args:
        year: Calendar year filter, or ``None`` for all-time views.
        period: ``all``, ``qN`` or ``mN``; any other value is kept verbatim and
            classified as ``unknown`` so the filter can fail closed.
    """

    year: int | None = None
    period: str = ALL_PERIODS

    def __post_init__(self) -> None:
        object.__setattr__(self, "period", (self.period or ALL_PERIODS).strip().lower())

    @property
    def granularity(self) -> PeriodGranularity:
        """Classify the period selector."""
        if self.period == ALL_PERIODS:
            return "all"
        if _QUARTER_RE.match(self.period):
            return "quarter"
        if _MONTH_RE.match(self.period):
            return "month"
        return "unknown"

    @property
    def quarter(self) -> int | None:
        """Requested quarter (1..4) when the selector is ``qN``."""
        m = _QUARTER_RE.match(self.period)
        return int(m.group(1)) if m else None

    @property
    def month(self) -> int | None:
        """Requested month (1..12) when the selector is ``mN``."""
        m = _MONTH_RE.match(self.period)
        return int(m.group(1)) if m else None

    @property
    def year_label(self) -> str:
        """Year as echoed to clients (``all`` when unfiltered)."""
        return str(self.year) if self.year is not None else ALL_PERIODS

    @classmethod
    def parse(cls, year: str | None, period: str | None, *, current_year: int) -> PeriodSpec:
        """Build a spec from raw query values.

        Args:
            year: ``YYYY``, ``all`` for all-time, or empty/``None`` for ``current_year``.
            period: Period selector; empty/``None`` means ``all``.
            current_year: Year applied when ``year`` is omitted.

        Raises:
            ValueError: If ``year`` is not a 4-digit year, ``all`` or empty.
        """
        raw = (year or "").strip()
        if not raw:
            parsed: int | None = current_year
        elif raw.lower() == ALL_PERIODS:
            parsed = None
        elif len(raw) == 4 and raw.isdigit():
            parsed = int(raw)
        else:
            raise ValueError(f"invalid year: {raw!r}")
        return cls(year=parsed, period=period or ALL_PERIODS)
