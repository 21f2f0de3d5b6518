"""Shared HTTP client factory — connection pooling for outbound requests.

The quotation client keeps one httpx.AsyncClient per session so the
session cookie set by /api/auth/login rides along on every request.

Usage:
    from quotedesk.http_client import make_client
    async with make_client() as http:
        resp = await http.get("/api/suppliers/quotations")
"""

import httpx

from .config import settings

_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)


def make_client(
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float | None = None,
) -> httpx.AsyncClient:
    """Build a pooled AsyncClient rooted at the API base URL."""
    return httpx.AsyncClient(
        base_url=base_url or settings.api_base_url,
        timeout=timeout or settings.client_timeout_seconds,
        limits=_LIMITS,
        follow_redirects=False,
        transport=transport,
        headers={"Accept": "application/json"},
    )


async def close_client(client: httpx.AsyncClient) -> None:
    """Shut down a client; tolerate an already-closed transport."""
    try:
        await client.aclose()
    except RuntimeError:
        pass
