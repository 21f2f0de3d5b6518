"""
buyer.py — Buyer Decision Router

Buyers accept or reject quotations addressed to them. These are the only
transitions into "accepted" and "rejected".

Business Rules:
- Only the buyer who owns the RFQ/inquiry may decide
- Only open (pending/sent, not past validUntil) quotations can be decided
- Accepting an RFQ quotation closes the RFQ

Called by: main.py (router mount)
Depends on: services/quotation_service, dependencies
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_buyer
from ..models import Buyer
from ..schemas.quotations import QuotationDecision, QuotationOut
from ..services import quotation_service as svc
from .quotations import raise_for_service_error

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["buyer"])


def _decide(db, buyer, quotation_id, quotation_type, decision, payload=None):
    if payload and payload.reason:
        log.info("Buyer %s %s quotation %s: %s", buyer.id, decision, quotation_id, payload.reason)
    try:
        return svc.record_buyer_decision(db, buyer.id, quotation_id, quotation_type, decision)
    except ValueError as e:
        raise_for_service_error(e)


@router.post("/quotations/{quotation_id}/accept", response_model=QuotationOut)
async def accept_rfq_quotation(
    quotation_id: str,
    payload: QuotationDecision | None = None,
    buyer: Buyer = Depends(require_buyer),
    db: Session = Depends(get_db),
):
    return _decide(db, buyer, quotation_id, "rfq", "accepted", payload)


@router.post("/quotations/{quotation_id}/reject", response_model=QuotationOut)
async def reject_rfq_quotation(
    quotation_id: str,
    payload: QuotationDecision | None = None,
    buyer: Buyer = Depends(require_buyer),
    db: Session = Depends(get_db),
):
    return _decide(db, buyer, quotation_id, "rfq", "rejected", payload)


@router.post("/inquiry-quotations/{quotation_id}/accept", response_model=QuotationOut)
async def accept_inquiry_quotation(
    quotation_id: str,
    payload: QuotationDecision | None = None,
    buyer: Buyer = Depends(require_buyer),
    db: Session = Depends(get_db),
):
    return _decide(db, buyer, quotation_id, "inquiry", "accepted", payload)


@router.post("/inquiry-quotations/{quotation_id}/reject", response_model=QuotationOut)
async def reject_inquiry_quotation(
    quotation_id: str,
    payload: QuotationDecision | None = None,
    buyer: Buyer = Depends(require_buyer),
    db: Session = Depends(get_db),
):
    return _decide(db, buyer, quotation_id, "inquiry", "rejected", payload)
