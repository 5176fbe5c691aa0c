# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Caller identity dependency.

Authentication happens upstream; the gateway forwards the authenticated user
as the ``X-User-Id`` header. A missing or non-positive id is rejected with
``InvalidUserError`` (401 ``INVALID_USER``).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header

from fiscal_dashboard_api.domain.exceptions.dashboard import InvalidUserError
from fiscal_dashboard_api.infrastructure.logging.logger import set_request_context

USER_ID_HEADER = "X-User-Id"


async def require_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> int:
    """Return the caller's user id and bind it to the log context."""
    raw = (x_user_id or "").strip()
    if not raw:
        raise InvalidUserError(f"missing {USER_ID_HEADER} header")
    try:
        user_id = int(raw)
    except ValueError:
        raise InvalidUserError(f"invalid {USER_ID_HEADER} header") from None
    if user_id <= 0:
        raise InvalidUserError(f"invalid {USER_ID_HEADER} header", details={"user_id": user_id})
    set_request_context(user_id=user_id)
    return user_id
