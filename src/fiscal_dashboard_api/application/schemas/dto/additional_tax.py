# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Additional Tax DTO (Application Layer).

Purpose:
    Validate the loosely-typed ``additionalTaxes`` payload stored with each
    financial record exactly once, at the storage boundary, and convert it to
    domain :class:`AdditionalTax` entries.

Accepted raw shapes:
    * ``None`` or ``""``: no taxes.
    * A JSON string encoding a list of tax objects.
    * A list of tax mappings (``{"name", "amount", "isPercentage", "value"?}``).

Malformed input never raises: it is logged and treated as "no taxes".

Layer: application/schemas/dto
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from fiscal_dashboard_api.application.schemas.dto.base import BaseDTO
from fiscal_dashboard_api.domain.entities.financial_records import AdditionalTax
from fiscal_dashboard_api.infrastructure.logging.logger import get_json_logger

__all__ = ["AdditionalTaxDTO", "parse_additional_taxes", "dump_additional_taxes"]

_LOGGER = get_json_logger(__name__)


class AdditionalTaxDTO(BaseDTO):
    """One named tax adjustment as exchanged with storage and clients."""

    # Stored payloads predate this schema and may carry extra UI keys.
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, description="Tax label, e.g. IVA or IRPF.")
    amount: Decimal = Field(description="Rate or money amount; negative for withholdings.")
    is_percentage: bool = Field(
        default=False,
        alias="isPercentage",
        description="Whether amount is a percentage of the record base.",
    )
    value: Decimal | None = Field(
        default=None,
        description="Exact tax amount realized on the record, when known.",
    )

    @field_validator("amount", "value", mode="before")
    @classmethod
    def _coerce_decimal(cls, value: Any) -> Any:
        """Accept numeric strings with a decimal comma; blank value means unset."""
        if isinstance(value, str):
            value = value.strip().replace(",", ".")
            return value or None
        return value

    def to_domain(self) -> AdditionalTax:
        """Convert to the domain entity."""
        return AdditionalTax(
            name=self.name,
            amount=self.amount,
            is_percentage=self.is_percentage,
            value=self.value,
        )


_TAX_LIST = TypeAdapter(list[AdditionalTaxDTO])


def parse_additional_taxes(raw: Any, *, record: str | None = None) -> tuple[AdditionalTax, ...]:
    """Validate a raw tax payload into domain entries.

    Args:
        raw: Stored value (JSON text, list of mappings, or ``None``).
        record: Optional record label included in warning logs.

    Returns:
        Tuple of domain tax entries; empty when the payload is absent or malformed.
    """
    if raw is None or raw == "" or raw == []:
        return ()
    payload = raw
    if isinstance(raw, (str, bytes)):
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            _LOGGER.warning(
                "additional_taxes_malformed",
                extra={"record": record, "reason": f"invalid json: {exc}"},
            )
            return ()
    if payload is None:
        return ()
    try:
        items = _TAX_LIST.validate_python(payload)
    except ValidationError as exc:
        _LOGGER.warning(
            "additional_taxes_malformed",
            extra={"record": record, "reason": f"{exc.error_count()} validation error(s)"},
        )
        return ()
    return tuple(item.to_domain() for item in items)


def dump_additional_taxes(taxes: tuple[AdditionalTax, ...]) -> list[dict[str, Any]]:
    """Serialize domain tax entries to the stored JSON shape."""
    out: list[dict[str, Any]] = []
    for t in taxes:
        item: dict[str, Any] = {
            "name": t.name,
            "amount": format(t.amount, "f"),
            "isPercentage": t.is_percentage,
        }
        if t.value is not None:
            item["value"] = format(t.value, "f")
        out.append(item)
    return out
