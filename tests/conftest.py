"""Global test fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from qrgate.api.main import app  # noqa: E402
from qrgate.ratelimit.limiter import RateLimiter  # noqa: E402


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def clock():
    # Fresh limiter per test so buckets never leak between tests.
    fake = FakeClock(1_000_000)
    original_limiter = app.state.rate_limiter
    original_clock = app.state.clock
    app.state.rate_limiter = RateLimiter(window_ms=300_000, max_tokens=5, idle_windows=3)
    app.state.clock = fake
    yield fake
    app.state.rate_limiter = original_limiter
    app.state.clock = original_clock


@pytest.fixture
def limiter() -> RateLimiter:
    return app.state.rate_limiter
