# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Root of the fiscal dashboard exception taxonomy. Each subclass pins a
    stable machine-readable ``code`` and the HTTP status adapters should use
    when the error crosses the request boundary.

Layer:
    domain/exceptions
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all domain/application exceptions.

    Attributes:
        code: Stable UPPER_SNAKE_CASE identifier echoed in error envelopes.
        http_status: Status adapters map this error to.
        details: Structured, client-safe context.
    """

    code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details: dict[str, Any] = details or {}
