"""
rate_limit.py — Login attempt throttle
======================================
Uses slowapi to enforce a per-IP fixed-window limit on the login endpoint.
One ``Limiter`` is built per application by ``create_login_limiter`` and
kept on ``app.state.limiter``; tests get a fresh one with every app.

Only the standard ``RateLimit-*`` headers are sent. slowapi's own
``X-RateLimit-*`` headers stay disabled.
"""
from __future__ import annotations

import logging
import math
import time

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import Settings, settings as default_settings

audit_log = logging.getLogger("userdir.audit")

LOGIN_LIMIT_MESSAGE = (
    "Too many login attempts from this IP, please try again after 60 second pause!"
)


def create_login_limiter(cfg: Settings | None = None) -> Limiter:
    cfg = cfg or default_settings
    return Limiter(
        key_func=get_remote_address,
        default_limits=[],  # applied explicitly on the login route
        strategy="fixed-window",
        storage_uri="memory://",
        headers_enabled=False,
        enabled=cfg.rate_limit_enabled,
    )


def apply_rate_limit_headers(request: Request, response: Response) -> None:
    """Copy the current window's quota onto ``response`` as RateLimit-* headers."""
    current = getattr(request.state, "view_rate_limit", None)
    limiter: Limiter | None = getattr(request.app.state, "limiter", None)
    if current is None or limiter is None:
        return

    item, keys = current
    reset_at, remaining = limiter.limiter.get_window_stats(item, *keys)
    reset_in = max(0, math.ceil(reset_at - time.time()))
    window = item.get_expiry()

    response.headers["RateLimit-Policy"] = f"{item.amount};w={window}"
    response.headers["RateLimit-Limit"] = str(item.amount)
    response.headers["RateLimit-Remaining"] = str(max(0, remaining))
    response.headers["RateLimit-Reset"] = str(reset_in)


def login_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Audit the rejected attempt and answer 429 with the fixed message."""
    client = get_remote_address(request)
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    audit_log.warning(
        "Too many requests: %s\t%s\t%s\t%s",
        LOGIN_LIMIT_MESSAGE,
        request.method,
        url,
        client,
        extra={
            "event": "login_rate_limited",
            "method": request.method,
            "url": url,
            "client": client,
            "origin": request.headers.get("origin"),
        },
    )

    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": LOGIN_LIMIT_MESSAGE},
    )
    apply_rate_limit_headers(request, response)
    if "RateLimit-Reset" in response.headers:
        response.headers["Retry-After"] = response.headers["RateLimit-Reset"]
    return response
