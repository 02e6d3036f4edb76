"""Request throttling keyed on the shopper's form session."""
from __future__ import annotations

import os

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

DEFAULT_LIMIT = "120/minute"


def form_session_key(request: Request) -> str:
    """
    Limit per form session; fall back to the client IP before a cookie exists.

    Each session owns one form, so this bounds quantity edits and submit
    presses per form rather than per shared NAT address.
    """
    state = getattr(request.scope.get("app"), "state", None)
    cookie_name = getattr(state, "session_cookie", "session")
    session_id = request.cookies.get(cookie_name)
    if session_id:
        return f"session:{session_id}"

    xff = request.headers.get("X-Forwarded-For")
    if xff:
        first = xff.split(",")[0].strip()
        if first:
            return f"ip:{first}"
    return f"ip:{get_remote_address(request)}"


def form_limits() -> list[str]:
    if os.getenv("RATE_LIMIT_DISABLED", "").strip().lower() in {"1", "true", "yes"}:
        return []
    return [os.getenv("BULK_ORDER_RATE_LIMIT", DEFAULT_LIMIT)]


def build_limiter() -> Limiter:
    return Limiter(key_func=form_session_key, default_limits=form_limits())
