# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Tax Extractor (Domain Service)

Purpose:
    Separate a record's tax-exclusive base from its VAT (IVA) and IRPF
    amounts, given the record's gross amount and its validated list of
    additional taxes.

Rules:
    * Only entries named IVA or IRPF (case-insensitive) are considered; when a
      name repeats, the last entry wins.
    * Records with an explicit base (invoice/quote ``subtotal``) realize
      percentages over that base.
    * Records without one (transactions) recover the base from the gross
      amount: ``base = total / (1 + rate/100)`` and ``vat = total - base``
      for a percentage VAT, ``base = total - vat`` for a fixed VAT.
    * IRPF percentages are computed over the base; IRPF is reported as a positive
      magnitude, whatever the sign used to express the withholding.
    * An entry carrying a stored ``value`` uses it as the exact tax amount.
      Without an explicit base, a percentage VAT then recovers the base as
      ``value * 100 / rate``.
    * No rounding happens here; the aggregator rounds once at the boundary.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from fiscal_dashboard_api.domain.entities.base import BaseEntity
from fiscal_dashboard_api.domain.entities.financial_records import AdditionalTax
from fiscal_dashboard_api.domain.enums.financial import TaxKind

__all__ = ["TaxBreakdown", "extract_taxes", "select_taxes"]

_HUNDRED = Decimal(100)
_ZERO = Decimal(0)


@dataclass(frozen=True, slots=True)
class TaxBreakdown(BaseEntity):
    """Decomposition of a record amount (unrounded)."""

    base_amount: Decimal
    vat_amount: Decimal
    irpf_amount: Decimal


def select_taxes(
    taxes: Iterable[AdditionalTax],
) -> tuple[AdditionalTax | None, AdditionalTax | None]:
    """Pick the effective IVA and IRPF entries (last one wins).

    Args:
        taxes: Validated tax entries in record order.

    Returns:
        ``(vat_entry, irpf_entry)``, either of which may be ``None``.
    """
    vat: AdditionalTax | None = None
    irpf: AdditionalTax | None = None
    for tax in taxes:
        kind = tax.kind
        if kind is TaxKind.IVA:
            vat = tax
        elif kind is TaxKind.IRPF:
            irpf = tax
    return vat, irpf


def _exact_value(entry: AdditionalTax | None) -> Decimal | None:
    """Stored realized amount of ``entry`` as a magnitude; zero counts as unset."""
    if entry is None or not entry.value:
        return None
    return abs(entry.value)


def extract_taxes(
    total: Decimal,
    taxes: Iterable[AdditionalTax],
    *,
    base: Decimal | None = None,
) -> TaxBreakdown:
    """Split an amount into base, VAT and IRPF.

    Args:
        total: Gross record amount (invoice total or transaction amount).
        taxes: Validated tax entries attached to the record.
        base: Known tax-exclusive base, when the record stores one.

    Returns:
        TaxBreakdown with unrounded values. With no recognized entries the
        base equals ``base`` (or ``total``) and both taxes are zero.
    """
    vat_entry, irpf_entry = select_taxes(taxes)
    vat_exact = _exact_value(vat_entry)

    if base is not None:
        base_amount = base
        if vat_exact is not None:
            vat_amount = vat_exact
        else:
            vat_amount = abs(vat_entry.realized(base)) if vat_entry is not None else _ZERO
    elif vat_entry is None:
        base_amount = total
        vat_amount = _ZERO
    elif vat_exact is not None:
        vat_amount = vat_exact
        rate = abs(vat_entry.amount)
        if vat_entry.is_percentage and rate:
            base_amount = vat_amount * _HUNDRED / rate
        else:
            base_amount = total - vat_amount
    elif vat_entry.is_percentage:
        rate = abs(vat_entry.amount)
        base_amount = total / (1 + rate / _HUNDRED)
        vat_amount = total - base_amount
    else:
        vat_amount = abs(vat_entry.amount)
        base_amount = total - vat_amount

    irpf_exact = _exact_value(irpf_entry)
    if irpf_entry is None:
        irpf_amount = _ZERO
    elif irpf_exact is not None:
        irpf_amount = irpf_exact
    elif irpf_entry.is_percentage:
        irpf_amount = base_amount * abs(irpf_entry.amount) / _HUNDRED
    else:
        irpf_amount = abs(irpf_entry.amount)

    return TaxBreakdown(base_amount=base_amount, vat_amount=vat_amount, irpf_amount=irpf_amount)
