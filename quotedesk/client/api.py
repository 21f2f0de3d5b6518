"""
client/api.py — HTTP calls against the supplier quotation API.

Business Rules:
- Every failure (transport error, non-2xx, unreadable body) becomes one
  QuotationApiError; there is no retry and no error classification
- The error message is the server's `detail`/`error` text when it sent one
- The list call asks for the whole set in one page; the dashboard does not
  paginate
- RFQ quotations are updated via /quotations/{id}, inquiry quotations via
  /inquiry-quotations/{id}

Called by: client/board.py
Depends on: http_client, schemas/quotations, config
"""

import logging

import httpx

from ..config import settings
from ..http_client import close_client, make_client
from ..schemas.quotations import QuotationOut

log = logging.getLogger("quotedesk.client")


class QuotationApiError(Exception):
    """Any failed call against the quotation API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def endpoint_for(quotation) -> str:
    """PUT target for a quotation, chosen by its type."""
    if quotation.type == "rfq":
        return f"/api/suppliers/quotations/{quotation.id}"
    if quotation.type == "inquiry":
        return f"/api/suppliers/inquiry-quotations/{quotation.id}"
    raise ValueError(f"Unknown quotation type: {quotation.type}")


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    detail = body.get("detail") or body.get("error") or body.get("message")
    if isinstance(detail, list):
        # FastAPI validation errors: [{"loc": [...], "msg": "..."}]
        msgs = [d.get("msg", "") for d in detail if isinstance(d, dict)]
        detail = "; ".join(m for m in msgs if m)
    return str(detail) if detail else fallback


class QuotationApiClient:
    """Thin async wrapper around the supplier endpoints.

    Owns its httpx.AsyncClient unless one is passed in; tests pass a client
    built on httpx.MockTransport.
    """

    def __init__(self, http: httpx.AsyncClient | None = None, base_url: str | None = None):
        self._owns_http = http is None
        self.http = http or make_client(base_url=base_url)

    async def _request(self, method: str, path: str, fallback: str, **kwargs):
        try:
            resp = await self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise QuotationApiError(str(e) or fallback) from e

        if resp.status_code >= 400:
            message = _error_message(resp, fallback)
            log.warning("%s %s -> %s %s", method, path, resp.status_code, message)
            raise QuotationApiError(message, resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise QuotationApiError(fallback, resp.status_code) from e

    # ── Auth ────────────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> dict:
        return await self._request(
            "POST", "/api/auth/login", "Login failed",
            json={"email": email, "password": password},
        )

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout", "Logout failed")

    # ── Quotations ──────────────────────────────────────────────────

    async def list_quotations(self, **filters) -> list[QuotationOut]:
        params = {k: v for k, v in filters.items() if v is not None}
        params.setdefault("limit", settings.quotation_page_limit_max)
        data = await self._request(
            "GET", "/api/suppliers/quotations", "Failed to fetch quotations", params=params
        )
        return [QuotationOut.model_validate(q) for q in (data or {}).get("quotations", [])]

    async def get_quotation(self, quotation_id: str, quotation_type: str = "rfq") -> QuotationOut:
        data = await self._request(
            "GET", f"/api/suppliers/quotations/{quotation_id}", "Failed to fetch quotation",
            params={"type": quotation_type},
        )
        return QuotationOut.model_validate(data)

    async def update_quotation(self, quotation, payload: dict) -> QuotationOut:
        data = await self._request(
            "PUT", endpoint_for(quotation), "Failed to update quotation", json=payload
        )
        return QuotationOut.model_validate(data)

    async def withdraw_quotation(self, quotation_id: str) -> None:
        await self._request(
            "DELETE", f"/api/suppliers/quotations/{quotation_id}", "Failed to withdraw quotation"
        )

    async def quotation_analytics(self) -> dict:
        return await self._request(
            "GET", "/api/suppliers/quotations/analytics", "Failed to fetch analytics"
        )

    async def quotation_templates(self) -> list[dict]:
        return await self._request(
            "GET", "/api/suppliers/quotations/templates", "Failed to fetch templates"
        )

    # ── RFQs ────────────────────────────────────────────────────────

    async def list_rfqs(self, **filters) -> dict:
        params = {k: v for k, v in filters.items() if v is not None}
        return await self._request("GET", "/api/suppliers/rfqs", "Failed to fetch RFQs", params=params)

    async def submit_rfq_quotation(self, rfq_id: str, payload: dict) -> QuotationOut:
        data = await self._request(
            "POST", f"/api/suppliers/rfqs/{rfq_id}/quotations", "Failed to create quotation",
            json=payload,
        )
        return QuotationOut.model_validate(data)

    async def aclose(self) -> None:
        if self._owns_http:
            await close_client(self.http)
