"""Async client for the supplier quotation dashboard.

    board = QuotationBoard(QuotationApiClient())
    await board.load()
    await board.submit_counter_offer(quotation, {"pricePerUnit": "12.50", "moq": "100"})
"""

from .api import QuotationApiClient, QuotationApiError
from .board import QuotationBoard
from .poller import ExpirySweep
from .store import QueryCache, QueryState, Toast, ToastQueue

__all__ = [
    "ExpirySweep",
    "QueryCache",
    "QueryState",
    "QuotationApiClient",
    "QuotationApiError",
    "QuotationBoard",
    "Toast",
    "ToastQueue",
]
