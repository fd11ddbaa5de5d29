from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from qrgate.api.gate import RequestGate, wall_clock_ms
from qrgate.api.routes_qr import router as qr_router
from qrgate.api.schemas import HealthResponse, LimitsOut
from qrgate.config.settings import Settings, settings
from qrgate.ratelimit.limiter import RateLimiter

BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"
INDEX_FILE = STATIC_DIR / "index.html"

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def build_rate_limiter(cfg: Settings = settings) -> RateLimiter:
    return RateLimiter(
        window_ms=cfg.rate_limit_window_ms,
        max_tokens=cfg.rate_limit_max_tokens,
        carry_partial_window=cfg.rate_limit_carry_partial_window,
        idle_windows=cfg.rate_limit_idle_windows,
    )


app = FastAPI(title="QRGate")
app.state.rate_limiter = build_rate_limiter()
app.state.clock = wall_clock_ms

# Added before CORS so CORS wraps it and throttled responses still get CORS headers
app.middleware("http")(
    RequestGate(prefix=settings.protected_prefix, trust_forwarded_for=settings.trust_forwarded_for)
)

cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

# API routes under /api
app.include_router(qr_router, prefix="/api")

ASSETS_DIR = STATIC_DIR / "assets"
if ASSETS_DIR.exists():
    app.mount("/assets", StaticFiles(directory=ASSETS_DIR), name="assets")


@app.get("/api/health", response_model=HealthResponse)
def health(request: Request):
    limiter: RateLimiter = request.app.state.rate_limiter
    return HealthResponse(
        status="ok",
        rate_limit=LimitsOut(
            window_ms=limiter.window_ms,
            max_tokens=limiter.max_tokens,
            tracked_identities=len(limiter),
        ),
    )


@app.get("/health", response_model=HealthResponse)
def health_root(request: Request):
    return health(request)


@app.get("/")
def index():
    if INDEX_FILE.exists():
        return FileResponse(INDEX_FILE)
    return {"detail": "UI not built"}
