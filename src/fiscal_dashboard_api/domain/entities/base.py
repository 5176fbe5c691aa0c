# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Base Entity (Domain Layer).

Purpose:
    Mixin for immutable domain entities. Provides frozen dataclass semantics,
    a validation hook for invariants and the shared money helpers used by
    every financial entity.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

#: Monetary quantum (two decimal places).
CENT = Decimal("0.01")

#: Canonical zero amount.
ZERO = Decimal("0.00")


def round_money(value: Decimal) -> Decimal:
    """Round a monetary value to cents using half-up rounding.

    Args:
        value: Unrounded amount.

    Returns:
        The amount quantized to two decimal places.
    """
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class BaseEntity:
    """Base mixin for domain entities.

    ``BaseEntity`` declares no fields; it provides the common dataclass
    configuration (frozen + slots) and the :meth:`__post_init__` hook that
    concrete entities override with their invariant checks.
    """

    def __post_init__(self) -> None:  # noqa: D401
        """Hook for subclasses to extend with invariant checks."""
        return
