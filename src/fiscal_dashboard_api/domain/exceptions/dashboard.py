# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Fiscal Dashboard Domain Exceptions

Purpose:
    Error conditions raised by the dashboard engine, the state notifier and the
    record write paths. Mapped to HTTP by adapters.

Layer: domain/exceptions
"""

from __future__ import annotations

from .base import DomainError


class InvalidUserError(DomainError):
    """Caller identity is missing or not a positive integer."""

    code = "INVALID_USER"
    http_status = 401


class RecordNotFoundError(DomainError):
    """The financial record does not exist or belongs to another user."""

    code = "RECORD_NOT_FOUND"
    http_status = 404


class StorageUnavailableError(DomainError):
    """The relational store could not serve the request."""

    code = "STORAGE_UNAVAILABLE"
    http_status = 503
