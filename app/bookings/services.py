# app/bookings/services.py

"""
Service layer for bookings.
Creates trip requests and drives them through the booking lifecycle.
"""

from typing import Callable, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.core.db import get_async_db
from app.agencies.utils import TenantContext
from app.bookings.assignment import AssignmentResolver
from app.bookings.exceptions import (
    BookingConflictException, BookingNotFoundException, ShareLinkUnavailableException,
)
from app.bookings.lifecycle import BookingEvent, next_status
from app.bookings.models import Booking, BookingStatus
from app.bookings.repository import BookingRepository
from app.bookings.schemas import AssignmentRequest, BookingCreate, ShareLinkResponse
from app.bookings.utils import build_trip_confirmation, generate_trip_id, generate_whatsapp_link
from app.roster.exceptions import RosterRecordNotFoundException
from app.roster.models import Client
from app.roster.repository import RosterRepository
from app.utils.exceptions import StoreOperationException
from app.utils.general import fill_if_missing
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_booking_repository(db: AsyncSession = Depends(get_async_db)) -> BookingRepository:
    """Dependency to get BookingRepository instance."""
    return BookingRepository(db)


class BookingService:
    """
    Business logic for bookings.
    """

    def __init__(self, repo: BookingRepository = Depends(get_booking_repository)):
        self.repo = repo
        self.roster = RosterRepository(repo.db)

    # === Creation ===

    async def create_booking(self, tenant: TenantContext, data: BookingCreate) -> Booking:
        """Create a Pending booking for one of the agency's clients."""
        client = await self.roster.get(Client, tenant.uid, data.client_id)
        if client is None:
            raise RosterRecordNotFoundException("client", data.client_id)

        booking = Booking(
            agency_id=tenant.uid,
            trip_id=await self._generate_trip_id(tenant),
            client_id=client.id,
            client_name=fill_if_missing(client.name, "Unknown"),
            client_phone=data.client_phone or client.mobile,
            pickup=data.pickup,
            drop=data.drop,
            trip_date=data.trip_date,
            trip_time=data.trip_time,
            trip_type=data.trip_type.value,
            notes=data.notes,
            status=BookingStatus.PENDING.value,
        )
        try:
            booking = await self.repo.create(booking)
            await self.repo.commit()
        except SQLAlchemyError as e:
            await self.repo.rollback()
            logger.error("Failed to create booking", tenant_id=tenant.uid, error=str(e), exc_info=True)
            raise StoreOperationException("create booking") from e

        logger.info("Booking created", tenant_id=tenant.uid, booking_id=booking.id, trip_id=booking.trip_id)
        return booking

    async def _generate_trip_id(self, tenant: TenantContext) -> str:
        trip_id = generate_trip_id()
        for _ in range(settings.trip_id_attempts):
            if not await self.repo.trip_id_exists(tenant.uid, trip_id):
                return trip_id
            trip_id = generate_trip_id()

        logger.warning("Trip id collides with an existing booking", tenant_id=tenant.uid, trip_id=trip_id)
        return trip_id

    # === Reads ===

    async def list_bookings(
        self, tenant: TenantContext, status: Optional[BookingStatus] = None,
        page: int = 1, per_page: int = 50,
    ) -> Tuple[List[Booking], int]:
        return await self.repo.list(tenant.uid, status, page, per_page)

    async def get_booking(self, tenant: TenantContext, booking_id: int) -> Booking:
        booking = await self.repo.get(tenant.uid, booking_id)
        if booking is None:
            raise BookingNotFoundException(booking_id)
        return booking

    # === Lifecycle ===

    async def assign(self, tenant: TenantContext, booking_id: int, request: AssignmentRequest) -> Booking:
        """
        Bind a driver and vehicle (and optionally an agent) to a Pending booking.
        The booking is left untouched when either id is missing or unknown.
        """
        booking = await self.get_booking(tenant, booking_id)
        new_status = next_status(booking.status, BookingEvent.ASSIGN)

        snapshot = await AssignmentResolver(self.roster).resolve(
            tenant, request.driver_id, request.vehicle_id, request.agent_id
        )

        def mutate(target: Booking) -> None:
            target.apply_assignment(snapshot)

        booking = await self._transition(tenant, booking, new_status, mutate)
        logger.info(
            "Booking assigned", tenant_id=tenant.uid, booking_id=booking_id,
            driver_id=snapshot.driver_id, vehicle_id=snapshot.vehicle_id, agent_id=snapshot.agent_id,
        )
        return booking

    async def complete(self, tenant: TenantContext, booking_id: int) -> Booking:
        """Mark an Assigned trip as finished; it now waits for billing."""
        booking = await self.get_booking(tenant, booking_id)
        booking = await self._transition(tenant, booking, next_status(booking.status, BookingEvent.COMPLETE))
        logger.info("Booking completed", tenant_id=tenant.uid, booking_id=booking_id)
        return booking

    async def cancel(self, tenant: TenantContext, booking_id: int) -> Booking:
        booking = await self.get_booking(tenant, booking_id)
        booking = await self._transition(tenant, booking, next_status(booking.status, BookingEvent.CANCEL))
        logger.info("Booking cancelled", tenant_id=tenant.uid, booking_id=booking_id)
        return booking

    async def _transition(
        self, tenant: TenantContext, booking: Booking, new_status: BookingStatus,
        mutate: Optional[Callable[[Booking], None]] = None,
    ) -> Booking:
        booking_id = booking.id
        if mutate:
            mutate(booking)
        booking.status = new_status.value
        try:
            await self.repo.flush()
            await self.repo.commit()
        except StaleDataError as e:
            await self.repo.rollback()
            logger.warning("Concurrent booking update", tenant_id=tenant.uid, booking_id=booking_id)
            raise BookingConflictException(booking_id) from e
        except SQLAlchemyError as e:
            await self.repo.rollback()
            logger.error("Failed to update booking", booking_id=booking_id, error=str(e), exc_info=True)
            raise StoreOperationException("update booking") from e
        return booking

    # === Sharing ===

    async def share_link(self, tenant: TenantContext, booking_id: int) -> ShareLinkResponse:
        """WhatsApp trip confirmation for an assigned booking."""
        booking = await self.get_booking(tenant, booking_id)
        if booking.assignment is None:
            raise ShareLinkUnavailableException(booking_id)

        message = build_trip_confirmation(booking, tenant.agency_name)
        return ShareLinkResponse(
            booking_id=booking.id,
            trip_id=booking.trip_id,
            message=message,
            url=generate_whatsapp_link(message),
        )
