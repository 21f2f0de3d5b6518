"""
schemas/quotations.py — Pydantic models for quotation endpoints

Validates counter-offer/edit payloads, RFQ and inquiry quotation creation,
buyer decisions, and shapes the unified quotation view returned to clients.

Business Rules:
- Prices must be > 0 and moq >= 1 when supplied
- Lead time and payment terms are required (non-blank) on creation
- validUntil accepts a bare date ("2026-03-01") or an ISO timestamp;
  naive values are taken as UTC

Called by: routers/quotations.py, routers/rfqs.py, routers/buyer.py, client/
Depends on: pydantic
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from pydantic import Field, field_validator

from .base import CamelModel, PaginatedResponse


def _coerce_valid_until(v):
    if v is None or v == "":
        return None
    if isinstance(v, str) and len(v) == 10:
        v = date.fromisoformat(v)
    if isinstance(v, date) and not isinstance(v, datetime):
        # A bare date is valid through the end of that day
        v = datetime.combine(v, time(23, 59, 59))
    if isinstance(v, datetime) and v.tzinfo is None:
        v = v.replace(tzinfo=timezone.utc)
    return v


# ── Unified view ─────────────────────────────────────────────────────


class QuotationOut(CamelModel):
    """One quotation as the supplier dashboard sees it, regardless of table."""
    id: str
    type: str
    status: str
    title: str = ""
    buyer_id: str | None = None
    buyer_name: str = ""
    buyer_company: str = ""
    target_price: float | None = None
    price_per_unit: float
    total_price: float
    moq: int
    required_qty: int | None = None
    lead_time: str = ""
    payment_terms: str = ""
    valid_until: datetime | None = None
    message: str | None = None
    terms_conditions: str | None = None
    attachments: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuotationListResponse(PaginatedResponse):
    quotations: list[QuotationOut] = Field(default_factory=list)


# ── Mutations ────────────────────────────────────────────────────────


class QuotationUpdate(CamelModel):
    """Counter-offer / edit payload. Only supplied fields are changed."""
    price_per_unit: float | None = Field(default=None, gt=0)
    total_price: float | None = Field(default=None, ge=0)
    moq: int | None = Field(default=None, ge=1)
    lead_time: str | None = None
    payment_terms: str | None = None
    valid_until: datetime | None = None
    message: str | None = None
    terms_conditions: str | None = None

    @field_validator("valid_until", mode="before")
    @classmethod
    def parse_valid_until(cls, v):
        return _coerce_valid_until(v)

    @field_validator("lead_time", "payment_terms")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class QuotationCreate(CamelModel):
    """New quotation against an RFQ or in answer to an inquiry."""
    price_per_unit: float = Field(gt=0)
    moq: int = Field(ge=1)
    lead_time: str
    payment_terms: str
    validity_period: int | None = Field(default=None, ge=1, le=365)
    terms_conditions: str | None = None
    message: str | None = None
    attachments: list[str] = Field(default_factory=list)

    @field_validator("lead_time", "payment_terms")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field must not be blank")
        return v


class QuotationDecision(CamelModel):
    """Buyer accept/reject payload."""
    reason: str | None = None


# ── Analytics & templates ────────────────────────────────────────────


class MonthlyTrendPoint(CamelModel):
    month: str
    quotation_count: int = 0
    accepted_count: int = 0
    total_value: float = 0


class QuotationAnalytics(CamelModel):
    total_quotations: int = 0
    rfq_quotations: int = 0
    inquiry_quotations: int = 0
    accepted_quotations: int = 0
    rejected_quotations: int = 0
    pending_quotations: int = 0
    expired_quotations: int = 0
    acceptance_rate: float = 0
    average_quotation_value: float = 0
    total_quotation_value: float = 0
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)


class QuotationTemplate(CamelModel):
    id: str
    name: str
    description: str
    payment_terms: str
    lead_time: str
    validity_period: int
    terms_conditions: str
    is_default: bool = False
