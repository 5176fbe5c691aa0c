# tests/unit/infrastructure/test_json_logger.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import contextvars
import json
import logging
from decimal import Decimal
from typing import Any

import pytest

from fiscal_dashboard_api.infrastructure.logging.logger import (
    _JsonFormatter,  # internal but importable
    configure_root_logging,
    get_request_id,
    set_request_context,
)


def _render(msg: str, **extra: Any) -> dict[str, Any]:
    logger = logging.getLogger("test.fiscal")
    record = logger.makeRecord(logger.name, logging.INFO, "test", 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(_JsonFormatter().format(record))


def test_configure_root_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        root.handlers = [h for h in root.handlers if not isinstance(h.formatter, _JsonFormatter)]
        monkeypatch.setenv("LOG_LEVEL", "debug")
        configure_root_logging()
        configure_root_logging()
        json_handlers = [h for h in root.handlers if isinstance(h.formatter, _JsonFormatter)]
        assert len(json_handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_event_name_and_extras_are_top_level_keys() -> None:
    payload = _render("dashboard-stats-cached", user_id=7, period="q1", income=Decimal("1.50"))
    assert payload["message"] == "dashboard-stats-cached"
    assert payload["user_id"] == 7
    assert payload["period"] == "q1"
    assert payload["income"] == "1.50"
    assert payload["level"] == "INFO"


def test_request_context_is_attached() -> None:
    def _inside() -> dict[str, Any]:
        set_request_context(request_id="req-1", user_id=42)
        assert get_request_id() == "req-1"
        return _render("financial_record_saved")

    payload = contextvars.copy_context().run(_inside)
    assert payload["request_id"] == "req-1"
    assert payload["user_id"] == 42
