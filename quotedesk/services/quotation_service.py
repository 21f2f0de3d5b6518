"""
quotation_service.py — Supplier quotation listing, edits, analytics & expiry.

Merges RFQ quotations and inquiry quotations into one view so the supplier
dashboard can treat them uniformly, while updates still land in the table
that owns the record.

Business Rules:
- A supplier only ever sees quotations it owns (RFQ: supplier_id, inquiry:
  the inquiry's supplier)
- Status shown is the effective status: open quotations past validUntil
  read as "expired" even before the sweep persists it
- Edits allowed while pending/sent/expired; accepted/rejected are final
- totalPrice is stored as sent; derived as price × max(moq, qty) only when
  the client omits it
- An edit that pushes validUntil into the future revives "expired" → "sent"
- Withdrawal (delete) only while the RFQ quotation is still "sent"
- Buyers accept/reject only open quotations on their own RFQs/inquiries;
  accepting an RFQ quotation closes the RFQ

Called by: routers/quotations.py, routers/rfqs.py, routers/buyer.py, scheduler.py
Depends on: models, schemas/quotations, utils/expiry, utils/pricing
"""

import logging
import math
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ..config import settings
from ..constants import (
    DECIDED_QUOTATION_STATUSES,
    EDITABLE_QUOTATION_STATUSES,
    OPEN_QUOTATION_STATUSES,
    QUOTATION_TYPES,
)
from ..models import Buyer, Inquiry, InquiryQuotation, Quotation, Rfq
from ..schemas.quotations import QuotationCreate, QuotationUpdate
from ..utils.expiry import as_utc, effective_status
from ..utils.pricing import compute_total_price, round_money

log = logging.getLogger("quotedesk.quotations")


class QuotationNotFound(ValueError):
    """Quotation missing or not owned by the caller."""


class QuotationNotEditable(ValueError):
    """Quotation is in a state that no longer accepts the requested change."""


# ── Serialization ─────────────────────────────────────────────────────


def _buyer_fields(buyer: Buyer | None) -> dict:
    if not buyer:
        return {"buyer_id": None, "buyer_name": "", "buyer_company": ""}
    user = buyer.user
    return {
        "buyer_id": buyer.id,
        "buyer_name": user.full_name if user else "",
        "buyer_company": buyer.company_name or "",
    }


def _money(value) -> float | None:
    return float(value) if value is not None else None


def rfq_quotation_to_dict(q: Quotation, now: datetime | None = None) -> dict:
    rfq = q.rfq
    return {
        "id": q.id,
        "type": "rfq",
        "status": effective_status(q.status, q.valid_until, now),
        "title": rfq.title if rfq else "",
        **_buyer_fields(rfq.buyer if rfq else None),
        "target_price": _money(rfq.target_price) if rfq else None,
        "price_per_unit": float(q.unit_price),
        "total_price": float(q.total_price),
        "moq": q.moq,
        "required_qty": rfq.quantity if rfq else None,
        "lead_time": q.lead_time or "",
        "payment_terms": q.payment_terms or "",
        "valid_until": as_utc(q.valid_until),
        "message": q.message,
        "terms_conditions": q.terms_conditions,
        "attachments": q.attachments or [],
        "created_at": as_utc(q.created_at),
        "updated_at": as_utc(q.updated_at),
    }


def inquiry_quotation_to_dict(q: InquiryQuotation, now: datetime | None = None) -> dict:
    inquiry = q.inquiry
    return {
        "id": q.id,
        "type": "inquiry",
        "status": effective_status(q.status, q.valid_until, now),
        "title": inquiry.subject if inquiry else "",
        **_buyer_fields(inquiry.buyer if inquiry else None),
        "target_price": _money(inquiry.target_price) if inquiry else None,
        "price_per_unit": float(q.price_per_unit),
        "total_price": float(q.total_price),
        "moq": q.moq,
        "required_qty": inquiry.quantity if inquiry else None,
        "lead_time": q.lead_time or "",
        "payment_terms": q.payment_terms or "",
        "valid_until": as_utc(q.valid_until),
        "message": q.message,
        "terms_conditions": None,
        "attachments": q.attachments or [],
        "created_at": as_utc(q.created_at),
        "updated_at": as_utc(q.updated_at),
    }


# ── Queries ───────────────────────────────────────────────────────────


def _rfq_quotations_query(db: Session, supplier_id: str):
    return (
        db.query(Quotation)
        .join(Rfq, Quotation.rfq_id == Rfq.id)
        .options(joinedload(Quotation.rfq).joinedload(Rfq.buyer).joinedload(Buyer.user))
        .filter(Quotation.supplier_id == supplier_id)
    )


def _inquiry_quotations_query(db: Session, supplier_id: str):
    return (
        db.query(InquiryQuotation)
        .join(Inquiry, InquiryQuotation.inquiry_id == Inquiry.id)
        .options(
            joinedload(InquiryQuotation.inquiry).joinedload(Inquiry.buyer).joinedload(Buyer.user)
        )
        .filter(Inquiry.supplier_id == supplier_id)
    )


def _apply_common_filters(q, model, date_from, date_to, min_value, max_value):
    if date_from:
        q = q.filter(model.created_at >= date_from)
    if date_to:
        q = q.filter(model.created_at <= date_to)
    if min_value is not None:
        q = q.filter(model.total_price >= min_value)
    if max_value is not None:
        q = q.filter(model.total_price <= max_value)
    return q


def collect_supplier_quotations(
    db: Session,
    supplier_id: str,
    *,
    quotation_type: str | None = None,
    status: str | None = None,
    search: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    min_value: float | None = None,
    max_value: float | None = None,
    now: datetime | None = None,
) -> list[dict]:
    """Every matching quotation for a supplier, both kinds, newest first.

    Status filtering runs on the effective status, after the merge, so that
    status="expired" also returns open quotations whose validity has lapsed.
    """
    now = now or datetime.now(timezone.utc)
    pattern = f"%{search.strip().lower()}%" if search and search.strip() else None
    rows: list[dict] = []

    if quotation_type in (None, "rfq"):
        q = _apply_common_filters(
            _rfq_quotations_query(db, supplier_id), Quotation, date_from, date_to, min_value, max_value
        )
        if pattern:
            q = q.filter(
                or_(
                    func.lower(Rfq.title).like(pattern),
                    func.lower(Rfq.description).like(pattern),
                    func.lower(Quotation.terms_conditions).like(pattern),
                )
            )
        rows.extend(rfq_quotation_to_dict(x, now) for x in q.all())

    if quotation_type in (None, "inquiry"):
        q = _apply_common_filters(
            _inquiry_quotations_query(db, supplier_id),
            InquiryQuotation, date_from, date_to, min_value, max_value,
        )
        if pattern:
            q = q.filter(
                or_(
                    func.lower(Inquiry.subject).like(pattern),
                    func.lower(Inquiry.message).like(pattern),
                    func.lower(InquiryQuotation.message).like(pattern),
                )
            )
        rows.extend(inquiry_quotation_to_dict(x, now) for x in q.all())

    if status:
        rows = [r for r in rows if r["status"] == status]

    _epoch = datetime.min.replace(tzinfo=timezone.utc)
    rows.sort(key=lambda r: r["created_at"] or _epoch, reverse=True)
    return rows


def list_supplier_quotations(
    db: Session,
    supplier_id: str,
    *,
    page: int = 1,
    limit: int | None = None,
    **filters,
) -> dict:
    """One page of collect_supplier_quotations() plus paging totals."""
    limit = min(limit or settings.quotation_page_limit, settings.quotation_page_limit_max)
    page = max(page, 1)
    rows = collect_supplier_quotations(db, supplier_id, **filters)

    total = len(rows)
    offset = (page - 1) * limit
    return {
        "quotations": rows[offset:offset + limit],
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


def recent_quotations(db: Session, supplier_id: str, limit: int | None = None) -> list[dict]:
    result = list_supplier_quotations(
        db, supplier_id, limit=limit or settings.recent_quotation_count
    )
    return result["quotations"]


def _load_owned(db: Session, supplier_id: str, quotation_id: str, quotation_type: str):
    if quotation_type not in QUOTATION_TYPES:
        raise ValueError(f"Unknown quotation type: {quotation_type}")
    if quotation_type == "rfq":
        record = (
            _rfq_quotations_query(db, supplier_id)
            .filter(Quotation.id == quotation_id)
            .first()
        )
    else:
        record = (
            _inquiry_quotations_query(db, supplier_id)
            .filter(InquiryQuotation.id == quotation_id)
            .first()
        )
    if not record:
        raise QuotationNotFound("Quotation not found or access denied")
    return record


def _to_dict(record, now: datetime | None = None) -> dict:
    if isinstance(record, Quotation):
        return rfq_quotation_to_dict(record, now)
    return inquiry_quotation_to_dict(record, now)


def get_quotation(
    db: Session, supplier_id: str, quotation_id: str, quotation_type: str = "rfq"
) -> dict:
    return _to_dict(_load_owned(db, supplier_id, quotation_id, quotation_type))


# ── Mutations ─────────────────────────────────────────────────────────


def update_quotation(
    db: Session,
    supplier_id: str,
    quotation_id: str,
    quotation_type: str,
    payload: QuotationUpdate,
    now: datetime | None = None,
) -> dict:
    """Apply a counter-offer / edit to one quotation and return the fresh view."""
    now = now or datetime.now(timezone.utc)
    record = _load_owned(db, supplier_id, quotation_id, quotation_type)
    if record.status not in EDITABLE_QUOTATION_STATUSES:
        raise QuotationNotEditable(
            "Quotation cannot be modified after it has been accepted or rejected"
        )

    updates = payload.model_dump(exclude_unset=True)
    is_rfq = isinstance(record, Quotation)
    required_qty = record.rfq.quantity if is_rfq else record.inquiry.quantity

    if "moq" in updates and updates["moq"] is not None and is_rfq:
        if updates["moq"] > record.rfq.quantity:
            raise ValueError("MOQ cannot be greater than RFQ quantity")

    price_field = "unit_price" if is_rfq else "price_per_unit"
    price_changed = False
    if updates.get("price_per_unit") is not None:
        setattr(record, price_field, round_money(updates["price_per_unit"]))
        price_changed = True
    if updates.get("moq") is not None:
        record.moq = updates["moq"]
        price_changed = True

    if updates.get("total_price") is not None:
        record.total_price = round_money(updates["total_price"])
    elif price_changed:
        record.total_price = compute_total_price(
            getattr(record, price_field), record.moq, required_qty
        )

    for field in ("lead_time", "payment_terms", "message"):
        if field in updates:
            setattr(record, field, updates[field])
    if is_rfq and "terms_conditions" in updates:
        record.terms_conditions = updates["terms_conditions"]

    if "valid_until" in updates:
        record.valid_until = updates["valid_until"]
        if updates["valid_until"] and as_utc(updates["valid_until"]) > now and record.status == "expired":
            record.status = "sent"

    record.updated_at = now
    db.commit()
    db.refresh(record)
    log.info("Quotation %s (%s) updated by supplier %s", record.id, quotation_type, supplier_id)
    return _to_dict(record, now)


def withdraw_quotation(db: Session, supplier_id: str, quotation_id: str) -> None:
    record = _load_owned(db, supplier_id, quotation_id, "rfq")
    if record.status != "sent":
        raise QuotationNotEditable(
            "Quotation cannot be withdrawn after it has been accepted or rejected"
        )
    db.delete(record)
    db.commit()
    log.info("Quotation %s withdrawn by supplier %s", quotation_id, supplier_id)


def create_inquiry_quotation(
    db: Session,
    supplier_id: str,
    inquiry_id: str,
    payload: QuotationCreate,
    now: datetime | None = None,
) -> dict:
    """Answer a direct inquiry with a priced quotation."""
    now = now or datetime.now(timezone.utc)
    inquiry = db.get(Inquiry, inquiry_id)
    if not inquiry or inquiry.supplier_id != supplier_id:
        raise QuotationNotFound("Inquiry not found or access denied")
    if inquiry.status == "closed":
        raise ValueError("Inquiry is closed")

    validity = payload.validity_period or settings.default_validity_days
    iq = InquiryQuotation(
        inquiry_id=inquiry.id,
        price_per_unit=round_money(payload.price_per_unit),
        total_price=compute_total_price(payload.price_per_unit, payload.moq, inquiry.quantity),
        moq=payload.moq,
        lead_time=payload.lead_time,
        payment_terms=payload.payment_terms,
        valid_until=now + timedelta(days=validity),
        message=payload.message,
        attachments=payload.attachments,
        status="sent",
        created_at=now,
        updated_at=now,
    )
    db.add(iq)
    inquiry.status = "responded"
    db.commit()
    db.refresh(iq)
    log.info("Inquiry %s answered with quotation %s", inquiry.id, iq.id)
    return inquiry_quotation_to_dict(iq, now)


def record_buyer_decision(
    db: Session,
    buyer_id: str,
    quotation_id: str,
    quotation_type: str,
    decision: str,
    now: datetime | None = None,
) -> dict:
    """Buyer accepts or rejects an open quotation addressed to them."""
    if decision not in DECIDED_QUOTATION_STATUSES:
        raise ValueError(f"Unknown decision: {decision}")
    now = now or datetime.now(timezone.utc)

    if quotation_type == "rfq":
        record = db.get(Quotation, quotation_id)
        owner = record.rfq.buyer_id if record else None
    else:
        record = db.get(InquiryQuotation, quotation_id)
        owner = record.inquiry.buyer_id if record else None
    if not record or owner != buyer_id:
        raise QuotationNotFound("Quotation not found or access denied")

    current = effective_status(record.status, record.valid_until, now)
    if current not in OPEN_QUOTATION_STATUSES:
        raise QuotationNotEditable(f"Quotation is {current} and can no longer be {decision}")

    record.status = decision
    record.updated_at = now
    if quotation_type == "rfq" and decision == "accepted":
        record.rfq.status = "closed"
    db.commit()
    db.refresh(record)
    log.info("Quotation %s %s by buyer %s", quotation_id, decision, buyer_id)
    return _to_dict(record, now)


# ── Expiry sweep ──────────────────────────────────────────────────────


def expire_overdue_quotations(db: Session, now: datetime | None = None) -> int:
    """Persist open → expired for every quotation whose validUntil has passed."""
    now = now or datetime.now(timezone.utc)
    count = 0
    for model in (Quotation, InquiryQuotation):
        count += (
            db.query(model)
            .filter(
                model.status.in_(OPEN_QUOTATION_STATUSES),
                model.valid_until.isnot(None),
                model.valid_until < now,
            )
            .update({"status": "expired", "updated_at": now}, synchronize_session=False)
        )
    db.commit()
    if count:
        log.info("Expiry sweep marked %d quotation(s) expired", count)
    return count


# ── Analytics ─────────────────────────────────────────────────────────


def quotation_analytics(db: Session, supplier_id: str, now: datetime | None = None) -> dict:
    """Status counts, values and a 12-month trend across both quotation kinds."""
    now = now or datetime.now(timezone.utc)
    views = collect_supplier_quotations(db, supplier_id, now=now)

    by_status: dict[str, int] = defaultdict(int)
    total_value = 0.0
    for v in views:
        by_status[v["status"]] += 1
        total_value += v["total_price"]

    total = len(views)
    accepted = by_status["accepted"]
    return {
        "total_quotations": total,
        "rfq_quotations": sum(1 for v in views if v["type"] == "rfq"),
        "inquiry_quotations": sum(1 for v in views if v["type"] == "inquiry"),
        "accepted_quotations": accepted,
        "rejected_quotations": by_status["rejected"],
        "pending_quotations": by_status["pending"] + by_status["sent"],
        "expired_quotations": by_status["expired"],
        "acceptance_rate": round(accepted / total * 100, 2) if total else 0,
        "average_quotation_value": round(total_value / total, 2) if total else 0,
        "total_quotation_value": round(total_value, 2),
        "monthly_trend": _monthly_trend(views, now),
    }


def _monthly_trend(views: list[dict], now: datetime) -> list[dict]:
    cutoff = now - timedelta(days=365)
    months: dict[str, dict] = {}
    for v in views:
        created = v["created_at"]
        if not created or created < cutoff:
            continue
        key = created.strftime("%Y-%m")
        point = months.setdefault(
            key, {"month": key, "quotation_count": 0, "accepted_count": 0, "total_value": 0.0}
        )
        point["quotation_count"] += 1
        if v["status"] == "accepted":
            point["accepted_count"] += 1
        point["total_value"] = round(point["total_value"] + v["total_price"], 2)
    return [months[k] for k in sorted(months)]


# ── Templates ─────────────────────────────────────────────────────────

QUOTATION_TEMPLATES = [
    {
        "id": "template-1",
        "name": "Standard Manufacturing Quote",
        "description": "Standard template for manufacturing products",
        "payment_terms": "30% deposit, 70% before shipment",
        "lead_time": "15-20 days after order confirmation",
        "validity_period": 30,
        "terms_conditions": "Price is valid for 30 days. FOB terms apply. Quality guarantee provided.",
        "is_default": True,
    },
    {
        "id": "template-2",
        "name": "Bulk Order Quote",
        "description": "Template for large quantity orders",
        "payment_terms": "T/T, L/C at sight",
        "lead_time": "20-30 days depending on quantity",
        "validity_period": 45,
        "terms_conditions": "Bulk pricing applies. Extended warranty included. Free samples available.",
        "is_default": False,
    },
    {
        "id": "template-3",
        "name": "Custom Product Quote",
        "description": "Template for customized products",
        "payment_terms": "50% deposit, 50% before delivery",
        "lead_time": "25-35 days for custom production",
        "validity_period": 15,
        "terms_conditions": "Custom specifications require approval. No returns on customized items.",
        "is_default": False,
    },
]


def get_quotation_templates() -> list[dict]:
    return [dict(t) for t in QUOTATION_TEMPLATES]
