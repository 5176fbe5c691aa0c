# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Base HTTP Schema (Adapters Layer)

Purpose:
    Canonical Pydantic bases for all adapter-layer HTTP schemas.

Layer: adapters/schemas/http

Notes:
    - Transport-facing only. Application DTOs must not import from this module.
    - ``CamelHTTPSchema`` emits camelCase field names and accepts both
      camelCase and snake_case on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseHTTPSchema(BaseModel):
    """Base class for all HTTP-facing schemas."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
        ser_json_inf_nan="null",
        use_enum_values=True,
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """Return a JSON-serializable dict (by alias) suitable for HTTP responses."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class CamelHTTPSchema(BaseHTTPSchema):
    """HTTP schema whose wire names are the camelCase of its field names."""

    model_config = ConfigDict(alias_generator=to_camel)
