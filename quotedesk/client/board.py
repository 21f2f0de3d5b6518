"""
client/board.py — Supplier quotation dashboard state.

Ties the API client, the query cache and the toast queue together the
way the dashboard page uses them: load the full list once, shape it with
client/views, submit counter-offers, and refetch after every successful
write.

Business Rules:
- submit_counter_offer never raises; every failure becomes an error toast
  carrying the server's message, or "Failed to update quotation"
- A failed submit leaves the cached list exactly as it was
- A successful submit shows "Quotation updated successfully" and refetches
  the whole list; a refetch cancelled from outside the caller's task
  does not undo the success
- resend() pushes validUntil 30 days out and submits the same PUT

Called by: dashboard callers, tests
Depends on: client/api, client/store, client/views, client/forms
"""

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from ..config import settings
from . import views
from .api import QuotationApiClient, QuotationApiError
from .forms import CounterOfferForm
from .store import QueryCache, QueryState, ToastQueue

log = logging.getLogger("quotedesk.client")

QUOTATIONS_KEY = "/api/suppliers/quotations"
UPDATE_FAILED = "Failed to update quotation"


def _validation_message(e: ValidationError) -> str:
    errors = e.errors()
    return errors[0]["msg"] if errors else UPDATE_FAILED


class QuotationBoard:
    def __init__(
        self,
        api: QuotationApiClient,
        cache: QueryCache | None = None,
        toasts: ToastQueue | None = None,
    ):
        self.api = api
        self.cache = cache or QueryCache()
        self.toasts = toasts or ToastQueue()
        self.cache.register(QUOTATIONS_KEY, self.api.list_quotations)

    # ── Reads ───────────────────────────────────────────────────────

    async def load(self) -> QueryState:
        return await self.cache.fetch(QUOTATIONS_KEY)

    async def refresh(self) -> QueryState | None:
        return await self.cache.invalidate(QUOTATIONS_KEY)

    @property
    def state(self) -> QueryState:
        return self.cache.state(QUOTATIONS_KEY)

    @property
    def quotations(self) -> list:
        return list(self.state.data or [])

    def visible(self, query: str | None = None, type_filter: str = "all", now: datetime | None = None) -> list:
        return views.visible_quotations(self.quotations, query, type_filter, now)

    def tabs(self, query: str | None = None, type_filter: str = "all", now: datetime | None = None) -> dict[str, list]:
        return views.partition(self.visible(query, type_filter, now))

    def tab_counts(self, query: str | None = None, type_filter: str = "all", now: datetime | None = None) -> dict[str, int]:
        return views.tab_counts(self.visible(query, type_filter, now))

    # ── Writes ──────────────────────────────────────────────────────

    async def submit_counter_offer(self, quotation, fields: Mapping) -> bool:
        """PUT an edited quotation. Returns True on success; failures become toasts."""
        try:
            form = CounterOfferForm.from_form(quotation, fields)
        except ValidationError as e:
            self.toasts.error(_validation_message(e))
            return False

        try:
            await self.api.update_quotation(quotation, form.to_payload())
        except (QuotationApiError, ValueError) as e:
            log.info("Counter-offer on %s rejected: %s", quotation.id, e)
            self.toasts.error(str(e) or UPDATE_FAILED)
            return False

        self.toasts.success("Quotation updated successfully")
        try:
            await self.refresh()
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            # The update landed; only the refetch was cancelled (board closed).
            log.info("Refetch after updating %s was cancelled", quotation.id)
        return True

    async def resend(self, quotation, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        valid_until = now + timedelta(days=settings.default_validity_days)
        return await self.submit_counter_offer(quotation, {"validUntil": valid_until.isoformat()})

    async def close(self) -> None:
        """Cancel in-flight fetches. Call when the dashboard goes away."""
        self.cache.cancel()
