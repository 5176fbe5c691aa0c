# tests/unit/application/test_additional_tax_dto.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import json
from decimal import Decimal

import pytest

from fiscal_dashboard_api.application.schemas.dto.additional_tax import (
    dump_additional_taxes,
    parse_additional_taxes,
)
from fiscal_dashboard_api.domain.entities.financial_records import AdditionalTax


def test_parses_json_text() -> None:
    raw = json.dumps([{"name": "IVA", "amount": 21, "isPercentage": True}])
    assert parse_additional_taxes(raw) == (AdditionalTax("IVA", Decimal("21"), True),)


def test_parses_list_and_ignores_unknown_keys() -> None:
    raw = [{"name": "IRPF", "amount": "-15,5", "isPercentage": True, "color": "red"}]
    (tax,) = parse_additional_taxes(raw)
    assert tax.amount == Decimal("-15.5")
    assert tax.is_percentage is True


def test_is_percentage_defaults_to_false() -> None:
    (tax,) = parse_additional_taxes([{"name": "IVA", "amount": "21"}])
    assert tax.is_percentage is False


@pytest.mark.parametrize("raw", [None, "", [], "null"])
def test_absent_payload_means_no_taxes(raw: object) -> None:
    assert parse_additional_taxes(raw) == ()


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"name": "IVA"}',
        [{"name": "IVA", "amount": "abc"}],
        [{"amount": 21}],
        [{"name": "", "amount": 21}],
    ],
)
def test_malformed_payload_is_logged_and_dropped(
    raw: object, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("WARNING"):
        assert parse_additional_taxes(raw, record="invoice:9") == ()
    assert any(r.getMessage() == "additional_taxes_malformed" for r in caplog.records)


def test_dump_matches_stored_shape() -> None:
    taxes = (AdditionalTax("IVA", Decimal("21.00"), True),)
    assert dump_additional_taxes(taxes) == [
        {"name": "IVA", "amount": "21.00", "isPercentage": True}
    ]


def test_stored_value_is_kept() -> None:
    raw = [{"name": "IVA", "amount": 21, "isPercentage": True, "value": "210,45"}]
    (tax,) = parse_additional_taxes(raw)
    assert tax.value == Decimal("210.45")


@pytest.mark.parametrize("value", [None, ""])
def test_blank_value_means_unset(value: object) -> None:
    (tax,) = parse_additional_taxes([{"name": "IVA", "amount": 21, "value": value}])
    assert tax.value is None


def test_dump_includes_value_only_when_known() -> None:
    taxes = (
        AdditionalTax("IVA", Decimal("21"), True, value=Decimal("210.45")),
        AdditionalTax("IRPF", Decimal("-15"), True),
    )
    dumped = dump_additional_taxes(taxes)
    assert dumped[0]["value"] == "210.45"
    assert "value" not in dumped[1]
    assert parse_additional_taxes(json.dumps(dumped)) == taxes
