"""QR symbol rendering."""

from __future__ import annotations

import io
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.image.pil import PilImage

from qrgate.config.settings import settings

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


def render_png(
    url: str,
    box_size: int | None = None,
    border: int | None = None,
    error_correction: str | None = None,
) -> bytes:
    """Encode an already validated URL as a QR code and return PNG bytes."""
    level = (error_correction or settings.qr_error_correction).upper()
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION_LEVELS[level],
        box_size=box_size or settings.qr_box_size,
        border=settings.qr_border if border is None else border,
    )
    qr.add_data(url)
    qr.make(fit=True)

    img = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf)
    data = buf.getvalue()
    logger.debug("rendered QR version=%s bytes=%d", qr.version, len(data))
    return data
