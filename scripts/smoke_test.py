"""Smoke test for a deployed QRGate API."""

from __future__ import annotations

import os

import httpx


def main() -> int:
    base = os.getenv("QRGATE_BASE_URL", "http://localhost:8000")
    health = httpx.get(f"{base}/api/health", timeout=10)
    if health.status_code != 200:
        print("Health failed:", health.status_code, health.text)
        return 1

    res = httpx.get(f"{base}/api/qr/check-limit", timeout=10)
    print("check-limit:", res.status_code)
    print("limit:", res.headers.get("X-RateLimit-Limit"))
    print("remaining:", res.headers.get("X-RateLimit-Remaining"))
    print("reset:", res.headers.get("X-RateLimit-Reset"))
    if res.status_code == 429:
        print("Throttled; retry after", res.headers.get("Retry-After"), "ms")
        return 0
    if res.status_code != 200:
        print("check-limit failed:", res.status_code, res.text)
        return 1

    png = httpx.get(f"{base}/api/qr/png", params={"url": "https://example.com"}, timeout=30)
    if png.status_code != 200 or png.headers.get("content-type") != "image/png":
        print("QR render failed:", png.status_code, png.text[:200])
        return 1
    print("png bytes:", len(png.content))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
