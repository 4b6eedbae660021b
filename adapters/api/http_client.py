from __future__ import annotations

import httpx

DEFAULT_BASE_URL = "https://app.bragbookgallery.com"
USER_AGENT = "case-gallery-compiler"


def create_http_client(
    *,
    base_url: str = DEFAULT_BASE_URL,
    timeout_seconds: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    return httpx.Client(
        base_url=base_url.rstrip("/"),
        timeout=httpx.Timeout(timeout_seconds),
        headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        transport=transport,
    )
