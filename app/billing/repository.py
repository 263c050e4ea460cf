# app/billing/repository.py

"""
Repository layer for bills and bill payments.
"""

from typing import List, Optional, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.billing.models import Bill, BillPayment, BillStatus
from app.bookings.models import Booking
from app.utils.logger import get_logger

logger = get_logger(__name__)


class BillingRepository:
    """
    Data Access Layer for bills, always scoped by agency.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # === Bill Operations ===

    async def create_bill(self, bill: Bill) -> Bill:
        """Stage a new bill; the caller commits together with the booking update"""
        self.db.add(bill)
        await self.db.flush()
        await self.db.refresh(bill)
        logger.debug("Inserted bill", bill_id=bill.id, booking_id=bill.booking_id)
        return bill

    async def get_bill(self, agency_id: str, bill_id: int, populate_existing: bool = False) -> Optional[Bill]:
        """Fetch a bill with its payments; populate_existing forces a fresh read"""
        stmt = select(Bill).where(Bill.id == bill_id, Bill.agency_id == agency_id)
        if populate_existing:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_bill_by_booking(self, agency_id: str, booking_id: int) -> Optional[Bill]:
        stmt = select(Bill).where(Bill.booking_id == booking_id, Bill.agency_id == agency_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_bills(
        self, agency_id: str, status: Optional[BillStatus] = None,
        page: int = 1, per_page: int = 50,
    ) -> Tuple[List[Bill], int]:
        """Bills newest first"""
        stmt = select(Bill).where(Bill.agency_id == agency_id)
        if status:
            stmt = stmt.where(Bill.status == status.value)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total_result = await self.db.execute(count_stmt)
        total_items = total_result.scalar() or 0

        stmt = stmt.order_by(desc(Bill.created_on), desc(Bill.id))
        stmt = stmt.offset((page - 1) * per_page).limit(per_page)

        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total_items

    async def all_bills(self, agency_id: str) -> List[Bill]:
        """Every bill of the agency newest first, bookings loaded alongside"""
        stmt = (
            select(Bill)
            .where(Bill.agency_id == agency_id)
            .order_by(desc(Bill.created_on), desc(Bill.id))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # === Payment Operations ===

    async def add_payment(self, bill: Bill, payment: BillPayment) -> BillPayment:
        """Append a payment; flushes the bill's balance in the same statement batch"""
        bill.payments.append(payment)
        await self.db.flush()
        return payment

    # === Booking lookups ===

    async def get_booking(self, agency_id: str, booking_id: int) -> Optional[Booking]:
        stmt = select(Booking).where(Booking.id == booking_id, Booking.agency_id == agency_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def flush(self) -> None:
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
