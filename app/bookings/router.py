# app/bookings/router.py

"""
FastAPI router for booking endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.agencies.utils import TenantContext, get_tenant_context
from app.bookings.models import BookingStatus
from app.bookings.schemas import (
    AssignmentRequest, BookingCreate, BookingResponse,
    PaginatedBookingResponse, ShareLinkResponse,
)
from app.bookings.services import BookingService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    """Create a new trip request. It starts as Pending."""
    return await service.create_booking(tenant, data)


@router.get("", response_model=PaginatedBookingResponse)
async def list_bookings(
    status: Optional[BookingStatus] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    """
    List bookings, newest first.

    **Filters:**
    - status: Pending, Assigned, Completed, Cancelled or Billed
    """
    bookings, total_items = await service.list_bookings(tenant, status, page, per_page)
    total_pages = (total_items + per_page - 1) // per_page

    return PaginatedBookingResponse(
        items=[BookingResponse.model_validate(b) for b in bookings],
        total_items=total_items,
        page=page,
        per_page=per_page,
        total_pages=total_pages,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    return await service.get_booking(tenant, booking_id)


@router.post("/{booking_id}/assign", response_model=BookingResponse)
async def assign_booking(
    booking_id: int,
    request: AssignmentRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    """Assign a driver and vehicle (agent optional) to a Pending booking."""
    return await service.assign(tenant, booking_id, request)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: int,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    """Mark an Assigned trip as finished. It moves to billing."""
    return await service.complete(tenant, booking_id)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    return await service.cancel(tenant, booking_id)


@router.get("/{booking_id}/share-link", response_model=ShareLinkResponse)
async def share_booking(
    booking_id: int,
    tenant: TenantContext = Depends(get_tenant_context),
    service: BookingService = Depends(),
):
    """WhatsApp link with the trip confirmation for client and driver."""
    return await service.share_link(tenant, booking_id)
