# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin, framework-aware helpers used by routers to consistently shape HTTP
    responses and headers.

Responsibilities:
    * Build SuccessEnvelope instances.
    * Compute strong, quoted ETags from canonical JSON material.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from fiscal_dashboard_api.adapters.schemas.http.envelopes import SuccessEnvelope


def _json_default(value: Any) -> str:
    """Serialize non-JSON-native types deterministically for hashing."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    raise TypeError(f"unsupported type for JSON hashing: {type(value)!r}")


def compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_default,
    ).encode("utf-8")
    return f'"{hashlib.sha256(material).hexdigest()}"'


@dataclass(slots=True)
class PresentResult[T]:
    """Presentation result.

    Attributes:
        body: A Pydantic schema instance.
        headers: Extra HTTP headers to apply.
        status_code: Optional HTTP status override.
    """

    body: T
    headers: Mapping[str, str]
    status_code: int | None = None


class BasePresenter:
    """Base presenter for HTTP response shaping.

    Business decisions stay in the use cases; presenters only map DTOs and
    entities to wire schemas and headers.
    """

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope with ``X-Request-ID`` and a strong ``ETag``."""
        body = SuccessEnvelope[Any](data=data)
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        headers["ETag"] = compute_quoted_etag(body.model_dump(mode="json", by_alias=True))
        return PresentResult(body=body, headers=headers)
