"""
schemas/rfqs.py — Pydantic models for the supplier RFQ surface

Shapes the RFQ browse list, RFQ detail and RFQ analytics responses.

Called by: routers/rfqs.py
Depends on: pydantic
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelModel, PaginatedResponse
from .quotations import QuotationOut


class RfqOut(CamelModel):
    id: str
    title: str
    description: str | None = None
    quantity: int
    target_price: float | None = None
    status: str
    category_id: str | None = None
    category_name: str | None = None
    buyer_id: str
    buyer_name: str = ""
    buyer_company: str = ""
    expires_at: datetime | None = None
    created_at: datetime | None = None
    has_quoted: bool = False
    my_quotation: QuotationOut | None = None
    quotation_count: int = 0


class RfqListResponse(PaginatedResponse):
    rfqs: list[RfqOut] = Field(default_factory=list)


class CategoryStat(CamelModel):
    category_id: str
    category_name: str
    rfq_count: int = 0
    quotation_count: int = 0


class RfqAnalytics(CamelModel):
    total_rfqs_available: int = 0
    quoted_rfqs: int = 0
    accepted_quotations: int = 0
    rejected_quotations: int = 0
    pending_quotations: int = 0
    quotation_acceptance_rate: float = 0
    average_quotation_value: float = 0
    total_quotation_value: float = 0
    top_categories: list[CategoryStat] = Field(default_factory=list)
