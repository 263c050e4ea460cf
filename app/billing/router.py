# app/billing/router.py

"""
FastAPI router for billing endpoints.
"""

from io import BytesIO
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from app.agencies.utils import TenantContext, get_tenant_context
from app.billing.models import BillStatus
from app.billing.schemas import (
    BillCreate, BillInputs, BillPreviewResponse, BillResponse,
    PaginatedBillResponse, PaymentCreate,
)
from app.billing.services import BillingService
from app.bookings.schemas import BookingResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.get("/pending-trips", response_model=List[BookingResponse])
async def list_pending_trips(
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    """Completed trips that have not been billed yet."""
    return await service.pending_trips(tenant)


@router.post("/preview", response_model=BillPreviewResponse)
async def preview_bill(
    inputs: BillInputs,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    """Live calculation of a bill; nothing is saved."""
    return service.preview(inputs)


@router.post("/bills", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
async def create_bill(
    data: BillCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    """
    Bill a Completed booking.

    The booking moves to Billed in the same transaction.
    """
    return await service.create_bill(tenant, data)


@router.get("/bills", response_model=PaginatedBillResponse)
async def list_bills(
    status: Optional[BillStatus] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    """List bills, newest first."""
    bills, total_items = await service.list_bills(tenant, status, page, per_page)
    total_pages = (total_items + per_page - 1) // per_page

    return PaginatedBillResponse(
        items=[BillResponse.model_validate(b) for b in bills],
        total_items=total_items,
        page=page,
        per_page=per_page,
        total_pages=total_pages,
    )


@router.get("/bills/{bill_id}", response_model=BillResponse)
async def get_bill(
    bill_id: int,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    return await service.get_bill(tenant, bill_id)


@router.post("/bills/{bill_id}/payments", response_model=BillResponse)
async def record_payment(
    bill_id: int,
    data: PaymentCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    """
    Record a partial payment.

    The amount must be greater than zero and no more than the balance due.
    """
    return await service.record_payment(tenant, bill_id, data)


@router.get("/bills/{bill_id}/invoice")
async def download_invoice(
    bill_id: int,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BillingService = Depends(),
):
    """Download the PDF invoice of a bill."""
    filename, content = await service.invoice_pdf(tenant, bill_id)
    return StreamingResponse(
        BytesIO(content),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
