"""QR code API routes (all behind the rate limit gate)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from qrgate.api.schemas import StatusResponse, ValidationOut
from qrgate.services.qr_render import render_png
from qrgate.services.url_validation import InvalidUrlError, sanitize_url, validate_url

router = APIRouter(prefix="/qr", tags=["qr"])


@router.get("/check-limit", response_model=StatusResponse)
def check_limit():
    # Throttling happens in the gate; reaching this handler means a token was spent.
    return StatusResponse()


@router.get("/validate", response_model=ValidationOut)
def validate(url: str = Query("")):
    result = validate_url(url)
    return ValidationOut(valid=result.valid, reason=result.reason)


@router.get("/png")
def qr_png(
    url: str = Query(...),
    box_size: Optional[int] = Query(None, ge=1, le=50),
    border: Optional[int] = Query(None, ge=0, le=20),
):
    try:
        clean = sanitize_url(url)
    except InvalidUrlError as e:
        raise HTTPException(status_code=422, detail={"valid": False, "reason": e.reason})

    png = render_png(clean, box_size=box_size, border=border)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": 'attachment; filename="qr-code.png"'},
    )
