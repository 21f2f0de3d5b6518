"""
rfqs.py — Supplier RFQ Router

Browse open RFQs, RFQ detail with the supplier's own quotation,
recommended RFQs, quotation submission, and RFQ analytics.

Business Rules:
- Defaults to open RFQs; ?hasQuoted filters the current page
- Submitting twice on the same RFQ is a 409

Called by: main.py (router mount)
Depends on: services/rfq_service, dependencies
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..constants import RFQ_STATUSES
from ..database import get_db
from ..dependencies import require_supplier
from ..models import Supplier
from ..rate_limit import limiter
from ..schemas.quotations import QuotationCreate, QuotationOut
from ..schemas.rfqs import RfqAnalytics, RfqListResponse, RfqOut
from ..services import rfq_service
from .quotations import raise_for_service_error

router = APIRouter(prefix="/api/suppliers/rfqs", tags=["rfqs"])


@router.get("", response_model=RfqListResponse)
async def list_rfqs(
    status: str | None = None,
    category_id: str | None = Query(None, alias="categoryId"),
    search: str | None = None,
    has_quoted: bool | None = Query(None, alias="hasQuoted"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.quotation_page_limit, ge=1, le=settings.quotation_page_limit_max),
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    if status and status not in RFQ_STATUSES:
        raise HTTPException(400, f"Unknown RFQ status: {status}")
    return rfq_service.list_available_rfqs(
        db,
        supplier.id,
        status=status,
        category_id=category_id,
        search=search,
        has_quoted=has_quoted,
        page=page,
        limit=limit,
    )


@router.get("/analytics", response_model=RfqAnalytics)
async def rfq_analytics(
    supplier: Supplier = Depends(require_supplier), db: Session = Depends(get_db)
):
    return rfq_service.rfq_analytics(db, supplier.id)


@router.get("/recommended", response_model=list[RfqOut])
async def recommended_rfqs(
    limit: int = Query(10, ge=1, le=50),
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    return rfq_service.recommended_rfqs(db, supplier.id, limit)


@router.get("/{rfq_id}", response_model=RfqOut)
async def get_rfq(
    rfq_id: str,
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        return rfq_service.get_rfq_detail(db, supplier.id, rfq_id)
    except ValueError as e:
        raise_for_service_error(e)


@router.post("/{rfq_id}/quotations", response_model=QuotationOut, status_code=201)
@limiter.limit(settings.rate_limit_quote_submit)
async def submit_quotation(
    rfq_id: str,
    payload: QuotationCreate,
    request: Request,
    supplier: Supplier = Depends(require_supplier),
    db: Session = Depends(get_db),
):
    try:
        return rfq_service.create_rfq_quotation(db, supplier.id, rfq_id, payload)
    except rfq_service.DuplicateQuotation as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise_for_service_error(e)
