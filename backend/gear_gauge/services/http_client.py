"""
Process-wide httpx.AsyncClient used by the Intervals.icu client.
Opened in the app lifespan and closed on shutdown; requests use paths relative to the API base URL.
"""
from __future__ import annotations

import httpx

from gear_gauge.config import settings

USER_AGENT = "gear-gauge/0.1"

_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    if _client is None:
        raise RuntimeError("HTTP client is closed; open it with init_http_client() in the app lifespan.")
    return _client


def init_http_client(timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Open the shared client (idempotent). transport lets tests plug in httpx.MockTransport."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            base_url=settings.intervals_icu_base_url.rstrip("/") + "/",
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=httpx.Timeout(timeout or float(settings.intervals_request_timeout_seconds), connect=10.0),
            transport=transport,
        )
    return _client


async def close_http_client() -> None:
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
