"""
quotations.py — Supplier Quotation Router

Unified list of RFQ and inquiry quotations, detail, counter-offer edits
on both sub-resources, withdrawal, analytics, and templates.

Business Rules:
- Every route is scoped to the logged-in supplier
- PUT on /quotations/{id} edits RFQ quotations, PUT on
  /inquiry-quotations/{id} edits inquiry quotations
- 404 not found/not owned, 409 not editable, 400 business rule,
  422 schema validation

Called by: main.py (router mount)
Depends on: services/quotation_service, dependencies
"""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..constants import QUOTATION_STATUSES
from ..database import get_db
from ..dependencies import require_supplier
from ..models import Supplier
from ..rate_limit import limiter
from ..schemas.base import OkResponse
from ..schemas.quotations import (
    QuotationAnalytics,
    QuotationCreate,
    QuotationListResponse,
    QuotationOut,
    QuotationTemplate,
    QuotationUpdate,
)
from ..services import quotation_service as svc

router = APIRouter(prefix="/api/suppliers", tags=["quotations"])


def raise_for_service_error(e: ValueError):
    """Map service exceptions onto HTTP status codes."""
    if isinstance(e, svc.QuotationNotFound):
        raise HTTPException(404, str(e))
    if isinstance(e, svc.QuotationNotEditable):
        raise HTTPException(409, str(e))
    raise HTTPException(400, str(e))


@router.get("/quotations", response_model=QuotationListResponse)
async def list_quotations(
    type: Literal["rfq", "inquiry"] | None = None,
    status: str | None = None,
    search: str | None = None,
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    min_value: float | None = Query(None, alias="minValue"),
    max_value: float | None = Query(None, alias="maxValue"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.quotation_page_limit, ge=1, le=settings.quotation_page_limit_max),
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    if status and status not in QUOTATION_STATUSES:
        raise HTTPException(400, f"Unknown status: {status}")
    return svc.list_supplier_quotations(
        db,
        supplier.id,
        quotation_type=type,
        status=status,
        search=search,
        date_from=date_from,
        date_to=date_to,
        min_value=min_value,
        max_value=max_value,
        page=page,
        limit=limit,
    )


@router.get("/quotations/analytics", response_model=QuotationAnalytics)
async def quotation_analytics(
    supplier: Supplier = Depends(require_supplier), db: Session = Depends(get_db)
):
    return svc.quotation_analytics(db, supplier.id)


@router.get("/quotations/templates", response_model=list[QuotationTemplate])
async def quotation_templates(supplier: Supplier = Depends(require_supplier)):
    return svc.get_quotation_templates()


@router.get("/quotations/recent", response_model=list[QuotationOut])
async def recent_quotations(
    supplier: Supplier = Depends(require_supplier), db: Session = Depends(get_db)
):
    return svc.recent_quotations(db, supplier.id)


@router.get("/quotations/{quotation_id}", response_model=QuotationOut)
async def get_quotation(
    quotation_id: str,
    type: Literal["rfq", "inquiry"] = "rfq",
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        return svc.get_quotation(db, supplier.id, quotation_id, type)
    except ValueError as e:
        raise_for_service_error(e)


@router.put("/quotations/{quotation_id}", response_model=QuotationOut)
@limiter.limit(settings.rate_limit_quote_submit)
async def update_rfq_quotation(
    quotation_id: str,
    payload: QuotationUpdate,
    request: Request,
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        return svc.update_quotation(db, supplier.id, quotation_id, "rfq", payload)
    except ValueError as e:
        raise_for_service_error(e)


@router.put("/inquiry-quotations/{quotation_id}", response_model=QuotationOut)
@limiter.limit(settings.rate_limit_quote_submit)
async def update_inquiry_quotation(
    quotation_id: str,
    payload: QuotationUpdate,
    request: Request,
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        return svc.update_quotation(db, supplier.id, quotation_id, "inquiry", payload)
    except ValueError as e:
        raise_for_service_error(e)


@router.delete("/quotations/{quotation_id}", response_model=OkResponse)
async def withdraw_quotation(
    quotation_id: str,
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        svc.withdraw_quotation(db, supplier.id, quotation_id)
    except ValueError as e:
        raise_for_service_error(e)
    return {"ok": True}


@router.post("/inquiries/{inquiry_id}/quotations", response_model=QuotationOut, status_code=201)
@limiter.limit(settings.rate_limit_quote_submit)
async def respond_to_inquiry(
    inquiry_id: str,
    payload: QuotationCreate,
    request: Request,
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        return svc.create_inquiry_quotation(db, supplier.id, inquiry_id, payload)
    except ValueError as e:
        raise_for_service_error(e)
