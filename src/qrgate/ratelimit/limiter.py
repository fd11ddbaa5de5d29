"""In-memory token bucket rate limiter (per client identity)."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Optional

logger = logging.getLogger(__name__)

ANONYMOUS_IDENTITY = "anonymous"


@dataclass
class Bucket:
    tokens: int
    last_refill: int  # epoch ms


@dataclass(frozen=True)
class Decision:
    """Outcome of one admission check plus the quota metadata to report."""

    allowed: bool
    remaining: int
    limit: int
    reset_at: int
    retry_after_ms: Optional[int] = None

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if not self.allowed and self.retry_after_ms is not None:
            headers["Retry-After"] = str(self.retry_after_ms)
        return headers


class RateLimiter:
    """
    Token bucket keyed by client identity.

    Every bucket holds at most `max_tokens` and regains `max_tokens` for each
    whole `window_ms` elapsed since its last refill. By default the refill
    clock restarts on every call, so time short of a full window is dropped.
    Set `carry_partial_window` to keep that remainder instead (a full bucket
    keeps none).

    Callers pass `now` (epoch ms) explicitly; it must not go backwards.
    """

    def __init__(
        self,
        window_ms: int = 300_000,
        max_tokens: int = 5,
        *,
        carry_partial_window: bool = False,
        idle_windows: int = 0,
    ) -> None:
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        if max_tokens < 1:
            raise ValueError("max_tokens must be >= 1")
        self.window_ms = window_ms
        self.max_tokens = max_tokens
        self.carry_partial_window = carry_partial_window
        self.idle_windows = max(0, idle_windows)
        self._buckets: dict[str, Bucket] = {}
        self._last_sweep: Optional[int] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._buckets)

    def check_and_consume(self, identity: Optional[str], now: int) -> Decision:
        """Refill the caller's bucket, then admit (consuming a token) or reject."""
        key = identity or ANONYMOUS_IDENTITY
        reset_at = now + self.window_ms
        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = Bucket(tokens=self.max_tokens, last_refill=now)
                self._buckets[key] = bucket

            windows = max(0, now - bucket.last_refill) // self.window_ms
            bucket.tokens = min(self.max_tokens, bucket.tokens + windows * self.max_tokens)
            if self.carry_partial_window and bucket.tokens < self.max_tokens:
                bucket.last_refill += windows * self.window_ms
            else:
                # A full bucket banks no time, so an evicted identity comes back identical.
                bucket.last_refill = max(bucket.last_refill, now)

            if bucket.tokens <= 0:
                return Decision(
                    allowed=False,
                    remaining=0,
                    limit=self.max_tokens,
                    reset_at=reset_at,
                    retry_after_ms=self.window_ms,
                )

            bucket.tokens -= 1
            return Decision(
                allowed=True,
                remaining=bucket.tokens,
                limit=self.max_tokens,
                reset_at=reset_at,
            )

    def peek(self, identity: str) -> Optional[Bucket]:
        """Return a copy of the bucket for `identity`, if tracked."""
        with self._lock:
            bucket = self._buckets.get(identity)
            return replace(bucket) if bucket is not None else None

    def evict_idle(self, now: int) -> int:
        """Drop buckets untouched for `idle_windows` windows; return how many."""
        if self.idle_windows <= 0:
            return 0
        horizon = self.idle_windows * self.window_ms
        with self._lock:
            stale = [k for k, b in self._buckets.items() if now - b.last_refill >= horizon]
            for key in stale:
                del self._buckets[key]
        if stale:
            logger.debug("evicted %d idle rate-limit buckets", len(stale))
        return len(stale)

    def sweep(self, now: int) -> int:
        """Run `evict_idle` at most once per window; return how many were dropped."""
        with self._lock:
            if self._last_sweep is not None and now - self._last_sweep < self.window_ms:
                return 0
            self._last_sweep = now
        return self.evict_idle(now)
