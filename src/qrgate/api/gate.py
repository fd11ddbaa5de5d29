"""Rate limiting middleware for the QR routes."""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import PlainTextResponse

from qrgate.ratelimit.limiter import ANONYMOUS_IDENTITY, RateLimiter

logger = logging.getLogger(__name__)

THROTTLED_MESSAGE = "Rate limit exceeded. Please try again later."


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def client_identity(request: Request, trust_forwarded_for: bool = False) -> str:
    """Network address of the caller, or the shared anonymous identity."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return ANONYMOUS_IDENTITY


class RequestGate:
    """
    Admits or throttles requests under `prefix` using the app's RateLimiter.

    The limiter and clock are read from `app.state` on every request so tests
    (and the app factory) can swap them without rebuilding middleware.
    """

    def __init__(self, prefix: str = "/api/qr", trust_forwarded_for: bool = False) -> None:
        self.prefix = prefix.rstrip("/") or "/"
        self.trust_forwarded_for = trust_forwarded_for

    def protects(self, path: str) -> bool:
        if self.prefix == "/":
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")

    def _now(self, request: Request) -> int:
        clock: Callable[[], int] = getattr(request.app.state, "clock", wall_clock_ms)
        try:
            return int(clock())
        except Exception:
            logger.exception("clock failed, falling back to wall clock")
            return wall_clock_ms()

    async def __call__(self, request: Request, call_next):
        if not self.protects(request.url.path):
            return await call_next(request)

        limiter: RateLimiter = request.app.state.rate_limiter
        identity = client_identity(request, self.trust_forwarded_for)
        now = self._now(request)
        limiter.sweep(now)

        decision = limiter.check_and_consume(identity, now)
        if not decision.allowed:
            logger.info("throttled %s on %s (reset_at=%d)", identity, request.url.path, decision.reset_at)
            return PlainTextResponse(THROTTLED_MESSAGE, status_code=429, headers=decision.headers())

        response = await call_next(request)
        response.headers.update(decision.headers())
        return response
