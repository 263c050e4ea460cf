# app/bookings/repository.py

"""
Repository layer for the bookings module.
"""

from typing import List, Optional, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.bookings.models import Booking, BookingStatus
from app.utils.logger import get_logger

logger = get_logger(__name__)


class BookingRepository:
    """
    Data Access Layer for bookings, always scoped by agency.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, booking: Booking) -> Booking:
        """Insert a booking"""
        self.db.add(booking)
        await self.db.flush()
        await self.db.refresh(booking)
        logger.debug("Inserted booking", booking_id=booking.id, trip_id=booking.trip_id)
        return booking

    async def get(self, agency_id: str, booking_id: int) -> Optional[Booking]:
        """Fetch a booking of the agency by id"""
        stmt = select(Booking).where(Booking.id == booking_id, Booking.agency_id == agency_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def trip_id_exists(self, agency_id: str, trip_id: str) -> bool:
        stmt = select(func.count()).select_from(Booking).where(
            Booking.agency_id == agency_id, Booking.trip_id == trip_id
        )
        result = await self.db.execute(stmt)
        return (result.scalar() or 0) > 0

    async def list(
        self, agency_id: str, status: Optional[BookingStatus] = None,
        page: int = 1, per_page: int = 50,
    ) -> Tuple[List[Booking], int]:
        """Bookings newest first, optionally filtered by status"""
        stmt = select(Booking).where(Booking.agency_id == agency_id)
        if status:
            stmt = stmt.where(Booking.status == status.value)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total_result = await self.db.execute(count_stmt)
        total_items = total_result.scalar() or 0

        stmt = stmt.order_by(desc(Booking.created_on), desc(Booking.id))
        stmt = stmt.offset((page - 1) * per_page).limit(per_page)

        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total_items

    async def list_by_trip_date(self, agency_id: str, status: BookingStatus) -> List[Booking]:
        """Bookings in a status, latest trip date first"""
        stmt = (
            select(Booking)
            .where(Booking.agency_id == agency_id, Booking.status == status.value)
            .order_by(desc(Booking.trip_date), desc(Booking.id))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self, agency_id: str, status: BookingStatus) -> int:
        stmt = select(func.count()).select_from(Booking).where(
            Booking.agency_id == agency_id, Booking.status == status.value
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def recent(self, agency_id: str, status: BookingStatus, limit: int) -> List[Booking]:
        """Most recently created bookings in a status"""
        stmt = (
            select(Booking)
            .where(Booking.agency_id == agency_id, Booking.status == status.value)
            .order_by(desc(Booking.created_on), desc(Booking.id))
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def flush(self) -> None:
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
