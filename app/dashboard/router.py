## app/dashboard/router.py

# Standard library imports
from typing import List

# Third party imports
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

# Local imports
from app.core.config import settings
from app.core.db import get_async_db
from app.agencies.utils import TenantContext, get_tenant_context
from app.bookings.models import BookingStatus
from app.bookings.repository import BookingRepository
from app.bookings.schemas import BookingResponse
from app.roster.models import Client, Vehicle
from app.roster.repository import RosterRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Dashboard"])


class DashboardResponse(BaseModel):
    """Headline counts and the latest pending trips"""
    total_clients: int
    total_vehicles: int
    pending_bookings: int
    active_trips: int
    recent_bookings: List[BookingResponse]


@router.get("/dashboard", summary="List all the dashboard elements", response_model=DashboardResponse)
async def agency_dashboard(
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    """
    List all the dashboard elements
    """
    roster = RosterRepository(db)
    bookings = BookingRepository(db)

    recent = await bookings.recent(tenant.uid, BookingStatus.PENDING, settings.dashboard_recent_limit)
    return DashboardResponse(
        total_clients=await roster.count(Client, tenant.uid),
        total_vehicles=await roster.count(Vehicle, tenant.uid),
        pending_bookings=await bookings.count_by_status(tenant.uid, BookingStatus.PENDING),
        active_trips=await bookings.count_by_status(tenant.uid, BookingStatus.ASSIGNED),
        recent_bookings=[BookingResponse.model_validate(b) for b in recent],
    )
