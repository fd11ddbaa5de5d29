from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    QRGate runtime settings, overridable through `QRGATE_*` environment variables.

    Defaults match a single public instance: 5 QR requests per client every
    5 minutes, high error correction so printed codes survive smudges.
    """

    model_config = SettingsConfigDict(env_prefix="QRGATE_", extra="ignore")

    # Token bucket: 5 requests per 5 minutes per client
    rate_limit_window_ms: int = Field(300_000, ge=1)
    rate_limit_max_tokens: int = Field(5, ge=1)
    # False keeps the classic behaviour (refill clock resets on every call)
    rate_limit_carry_partial_window: bool = False
    # Buckets idle this many windows are dropped; 0 disables eviction
    rate_limit_idle_windows: int = Field(3, ge=0)

    protected_prefix: str = "/api/qr"
    trust_forwarded_for: bool = False

    # QR symbol rendering
    qr_error_correction: Literal["L", "M", "Q", "H"] = "H"
    qr_box_size: int = Field(10, ge=1, le=50)
    qr_border: int = Field(4, ge=0, le=20)

    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173,http://localhost:3000"


settings = Settings()
