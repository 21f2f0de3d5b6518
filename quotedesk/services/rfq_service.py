"""
rfq_service.py — RFQ browsing, quoting and RFQ analytics for suppliers.

Business Rules:
- Suppliers browse "open" RFQs unless another status is asked for
- One quotation per supplier per RFQ
- A quotation needs an open, unexpired RFQ; price > 0; 1 <= moq <= RFQ quantity
- Total price = price × max(moq, RFQ quantity); validity defaults to 30 days
- Recommended RFQs are open RFQs in the supplier's published product
  categories that it has not quoted yet

Called by: routers/rfqs.py
Depends on: models, services/quotation_service, utils/pricing
"""

import logging
import math
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from ..config import settings
from ..models import Buyer, Category, Product, Quotation, Rfq
from ..schemas.quotations import QuotationCreate
from ..utils.expiry import as_utc
from ..utils.pricing import compute_total_price, round_money
from .quotation_service import QuotationNotFound, rfq_quotation_to_dict

log = logging.getLogger("quotedesk.rfqs")


class RfqUnavailable(ValueError):
    """RFQ is closed, expired, or otherwise not accepting quotations."""


class DuplicateQuotation(ValueError):
    """Supplier already quoted this RFQ."""


def _rfq_query(db: Session):
    return db.query(Rfq).options(
        joinedload(Rfq.buyer).joinedload(Buyer.user),
        joinedload(Rfq.category),
    )


def rfq_to_dict(
    rfq: Rfq,
    my_quotation: Quotation | None = None,
    quotation_count: int = 0,
    now: datetime | None = None,
) -> dict:
    buyer = rfq.buyer
    user = buyer.user if buyer else None
    return {
        "id": rfq.id,
        "title": rfq.title,
        "description": rfq.description,
        "quantity": rfq.quantity,
        "target_price": float(rfq.target_price) if rfq.target_price is not None else None,
        "status": rfq.status,
        "category_id": rfq.category_id,
        "category_name": rfq.category.name if rfq.category else None,
        "buyer_id": rfq.buyer_id,
        "buyer_name": user.full_name if user else "",
        "buyer_company": (buyer.company_name or "") if buyer else "",
        "expires_at": as_utc(rfq.expires_at),
        "created_at": as_utc(rfq.created_at),
        "has_quoted": my_quotation is not None,
        "my_quotation": rfq_quotation_to_dict(my_quotation, now) if my_quotation else None,
        "quotation_count": quotation_count,
    }


def _quotation_maps(db: Session, supplier_id: str, rfq_ids: list[str]):
    if not rfq_ids:
        return {}, {}
    mine = (
        db.query(Quotation)
        .filter(Quotation.rfq_id.in_(rfq_ids), Quotation.supplier_id == supplier_id)
        .all()
    )
    counts = (
        db.query(Quotation.rfq_id, func.count(Quotation.id))
        .filter(Quotation.rfq_id.in_(rfq_ids))
        .group_by(Quotation.rfq_id)
        .all()
    )
    return {q.rfq_id: q for q in mine}, {rfq_id: n for rfq_id, n in counts}


def list_available_rfqs(
    db: Session,
    supplier_id: str,
    *,
    status: str | None = None,
    category_id: str | None = None,
    search: str | None = None,
    has_quoted: bool | None = None,
    page: int = 1,
    limit: int | None = None,
) -> dict:
    limit = min(limit or settings.quotation_page_limit, settings.quotation_page_limit_max)
    page = max(page, 1)

    q = _rfq_query(db).filter(Rfq.status == (status or "open"))
    if category_id:
        q = q.filter(Rfq.category_id == category_id)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        q = q.filter(
            or_(func.lower(Rfq.title).like(pattern), func.lower(Rfq.description).like(pattern))
        )

    total = q.count()
    rfqs = q.order_by(Rfq.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    mine, counts = _quotation_maps(db, supplier_id, [r.id for r in rfqs])

    items = [rfq_to_dict(r, mine.get(r.id), counts.get(r.id, 0)) for r in rfqs]
    if has_quoted is not None:
        items = [i for i in items if i["has_quoted"] == has_quoted]

    return {
        "rfqs": items,
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


def get_rfq_detail(db: Session, supplier_id: str, rfq_id: str) -> dict:
    rfq = _rfq_query(db).filter(Rfq.id == rfq_id).first()
    if not rfq:
        raise QuotationNotFound("RFQ not found")
    mine, counts = _quotation_maps(db, supplier_id, [rfq.id])
    return rfq_to_dict(rfq, mine.get(rfq.id), counts.get(rfq.id, 0))


def create_rfq_quotation(
    db: Session,
    supplier_id: str,
    rfq_id: str,
    payload: QuotationCreate,
    now: datetime | None = None,
) -> dict:
    now = now or datetime.now(timezone.utc)
    rfq = db.get(Rfq, rfq_id)
    if not rfq:
        raise QuotationNotFound("RFQ not found")
    if rfq.status != "open" or (rfq.expires_at and as_utc(rfq.expires_at) < now):
        raise RfqUnavailable("RFQ is no longer accepting quotations")

    existing = db.query(Quotation).filter_by(rfq_id=rfq_id, supplier_id=supplier_id).first()
    if existing:
        raise DuplicateQuotation("You have already submitted a quotation for this RFQ")

    if payload.moq > rfq.quantity:
        raise ValueError("MOQ cannot be greater than RFQ quantity")

    validity = payload.validity_period or settings.default_validity_days
    quotation = Quotation(
        rfq_id=rfq.id,
        supplier_id=supplier_id,
        unit_price=round_money(payload.price_per_unit),
        total_price=compute_total_price(payload.price_per_unit, payload.moq, rfq.quantity),
        moq=payload.moq,
        lead_time=payload.lead_time,
        payment_terms=payload.payment_terms,
        validity_period=validity,
        valid_until=now + timedelta(days=validity),
        terms_conditions=payload.terms_conditions,
        message=payload.message,
        attachments=payload.attachments,
        status="sent",
        created_at=now,
        updated_at=now,
    )
    db.add(quotation)
    db.commit()
    db.refresh(quotation)
    log.info("Supplier %s quoted RFQ %s (quotation %s)", supplier_id, rfq.id, quotation.id)
    return rfq_quotation_to_dict(quotation, now)


def recommended_rfqs(db: Session, supplier_id: str, limit: int = 10) -> list[dict]:
    category_ids = [
        c for (c,) in db.query(Product.category_id)
        .filter(
            Product.supplier_id == supplier_id,
            Product.is_published.is_(True),
            Product.category_id.isnot(None),
        )
        .distinct()
        .all()
    ]
    if not category_ids:
        return []

    quoted = select(Quotation.rfq_id).where(Quotation.supplier_id == supplier_id)
    rfqs = (
        _rfq_query(db)
        .filter(
            Rfq.status == "open",
            Rfq.category_id.in_(category_ids),
            Rfq.id.notin_(quoted),
        )
        .order_by(Rfq.created_at.desc())
        .limit(limit)
        .all()
    )
    return [rfq_to_dict(r) for r in rfqs]


def rfq_analytics(db: Session, supplier_id: str) -> dict:
    stats = (
        db.query(
            Quotation.status,
            func.count(Quotation.id),
            func.avg(Quotation.total_price),
            func.sum(Quotation.total_price),
        )
        .filter(Quotation.supplier_id == supplier_id)
        .group_by(Quotation.status)
        .all()
    )
    by_status = {
        status: {"count": n, "avg": float(avg or 0), "sum": float(total or 0)}
        for status, n, avg, total in stats
    }

    open_rfqs = db.query(func.count(Rfq.id)).filter(Rfq.status == "open").scalar() or 0
    quoted_rfqs = (
        db.query(func.count(func.distinct(Quotation.rfq_id)))
        .filter(Quotation.supplier_id == supplier_id)
        .scalar()
        or 0
    )

    total = sum(s["count"] for s in by_status.values())
    accepted = by_status.get("accepted", {}).get("count", 0)

    top = (
        db.query(
            Rfq.category_id,
            Category.name,
            func.count(func.distinct(Rfq.id)),
            func.count(Quotation.id),
        )
        .select_from(Quotation)
        .join(Rfq, Quotation.rfq_id == Rfq.id)
        .outerjoin(Category, Rfq.category_id == Category.id)
        .filter(Quotation.supplier_id == supplier_id, Rfq.category_id.isnot(None))
        .group_by(Rfq.category_id, Category.name)
        .order_by(func.count(Quotation.id).desc())
        .limit(5)
        .all()
    )

    return {
        "total_rfqs_available": open_rfqs,
        "quoted_rfqs": quoted_rfqs,
        "accepted_quotations": accepted,
        "rejected_quotations": by_status.get("rejected", {}).get("count", 0),
        "pending_quotations": sum(
            by_status.get(s, {}).get("count", 0) for s in ("pending", "sent")
        ),
        "quotation_acceptance_rate": round(accepted / total * 100, 2) if total else 0,
        "average_quotation_value": round(by_status.get("accepted", {}).get("avg", 0), 2),
        "total_quotation_value": round(sum(s["sum"] for s in by_status.values()), 2),
        "top_categories": [
            {
                "category_id": cat_id,
                "category_name": name or "Unknown Category",
                "rfq_count": rfq_count,
                "quotation_count": q_count,
            }
            for cat_id, name, rfq_count, q_count in top
        ],
    }
