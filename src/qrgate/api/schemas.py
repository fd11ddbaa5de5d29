"""API schemas."""

from __future__ import annotations

from pydantic import BaseModel


class StatusResponse(BaseModel):
    status: str = "ok"


class ValidationOut(BaseModel):
    valid: bool
    reason: str


class LimitsOut(BaseModel):
    window_ms: int
    max_tokens: int
    tracked_identities: int


class HealthResponse(BaseModel):
    status: str
    rate_limit: LimitsOut
