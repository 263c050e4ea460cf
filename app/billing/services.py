# app/billing/services.py

"""
Service layer for billing.

Bills a completed booking and keeps its payment ledger consistent:
- the bill insert and the booking's move to Billed commit together
- a payment, the new balance and the new status commit together, guarded
  by the bill's version column
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.db import get_async_db
from app.agencies.utils import TenantContext
from app.billing import calculator
from app.billing.exceptions import (
    BillAlreadyExistsException, BillNotFoundException, BookingNotBillableException,
    InvalidBillInputException, InvalidPaymentAmountException, PaymentConflictException,
)
from app.billing.invoice import render_invoice
from app.billing.models import Bill, BillPayment, BillStatus, status_for
from app.billing.repository import BillingRepository
from app.billing.schemas import (
    BillCalculationResponse, BillCreate, BillInputs, BillPreviewResponse, PaymentCreate,
)
from app.bookings.exceptions import BookingConflictException, BookingNotFoundException
from app.bookings.lifecycle import BookingEvent, can_apply, next_status
from app.bookings.models import Booking, BookingStatus
from app.bookings.repository import BookingRepository
from app.utils.exceptions import StoreOperationException
from app.utils.general import fill_if_missing, random_reference, to_money
from app.utils.logger import get_logger

logger = get_logger(__name__)

INVOICE_PREFIX = "INV"
MAX_PAYMENT_ATTEMPTS = 3
# Numeric(14, 2) columns hold at most 12 integer digits
MAX_BILL_TOTAL = Decimal("1e12")


def get_billing_repository(db: AsyncSession = Depends(get_async_db)) -> BillingRepository:
    """Dependency to get BillingRepository instance."""
    return BillingRepository(db)


class BillingService:
    """
    Business logic for bills and payments.
    """

    def __init__(self, repo: BillingRepository = Depends(get_billing_repository)):
        self.repo = repo
        self.bookings = BookingRepository(repo.db)

    # === Calculation ===

    async def pending_trips(self, tenant: TenantContext) -> List[Booking]:
        """Completed bookings waiting for a bill, latest trip first."""
        return await self.bookings.list_by_trip_date(tenant.uid, BookingStatus.COMPLETED)

    def preview(self, inputs: BillInputs) -> BillPreviewResponse:
        """Run the calculator without persisting anything."""
        calculator.validate_inputs(inputs)
        calculation = calculator.compute(inputs)
        return BillPreviewResponse(
            inputs=inputs,
            calculation=BillCalculationResponse.model_validate(calculation),
        )

    # === Bill creation ===

    async def create_bill(self, tenant: TenantContext, data: BillCreate) -> Bill:
        """
        Bill a Completed booking. The bill row and the booking's Billed
        status are written in one transaction; nothing is stored when any
        check fails.
        """
        inputs = data.inputs
        calculator.validate_inputs(inputs)

        booking = await self.repo.get_booking(tenant.uid, data.booking_id)
        if booking is None:
            raise BookingNotFoundException(data.booking_id)
        if await self.repo.get_bill_by_booking(tenant.uid, booking.id):
            raise BillAlreadyExistsException(booking.id)
        if not can_apply(booking.status, BookingEvent.BILL):
            raise BookingNotBillableException(booking.id, booking.status)

        calculation = calculator.settle(inputs)
        if calculation.grand_total >= MAX_BILL_TOTAL:
            raise InvalidBillInputException(f"Bill total {calculation.grand_total} exceeds the allowed maximum")
        balance_due = calculation.balance_due

        bill = Bill(
            agency_id=tenant.uid,
            booking_id=booking.id,
            trip_id=booking.trip_id,
            client_name=fill_if_missing(booking.client_name, "Unknown"),
            invoice_number=random_reference(INVOICE_PREFIX),
            opening_km=to_money(inputs.opening_km),
            closing_km=to_money(inputs.closing_km),
            rate_per_km=to_money(inputs.rate_per_km),
            extra_km=to_money(inputs.extra_km),
            extra_hours=to_money(inputs.extra_hours),
            extra_hour_charge=to_money(inputs.extra_hour_charge),
            night_charge=to_money(inputs.night_charge),
            toll_parking=to_money(inputs.toll_parking),
            driver_allowance=to_money(inputs.driver_allowance),
            advance=to_money(inputs.advance),
            gst_enabled=inputs.gst_enabled,
            gst_percent=to_money(inputs.gst_percent),
            total_km=calculation.total_km,
            base_amount=calculation.base_amount,
            extra_km_amount=calculation.extra_km_amount,
            extra_hours_amount=calculation.extra_hours_amount,
            sub_total=calculation.sub_total,
            gst_amount=calculation.gst_amount,
            grand_total=calculation.grand_total,
            balance_due=balance_due,
            status=status_for(balance_due).value,
            booking=booking,
            payments=[],
        )
        booking.status = next_status(booking.status, BookingEvent.BILL).value
        booking_id = booking.id

        try:
            bill = await self.repo.create_bill(bill)
            await self.repo.commit()
        except StaleDataError as e:
            await self.repo.rollback()
            logger.warning("Booking changed while billing", tenant_id=tenant.uid, booking_id=booking_id)
            raise BookingConflictException(booking_id) from e
        except IntegrityError as e:
            await self.repo.rollback()
            logger.warning("Duplicate bill for booking", tenant_id=tenant.uid, booking_id=booking_id)
            raise BillAlreadyExistsException(booking_id) from e
        except SQLAlchemyError as e:
            await self.repo.rollback()
            logger.error("Failed to create bill", booking_id=booking_id, error=str(e), exc_info=True)
            raise StoreOperationException("create bill") from e

        logger.info(
            "Bill created", tenant_id=tenant.uid, bill_id=bill.id, booking_id=booking_id,
            grand_total=str(bill.grand_total), balance_due=str(bill.balance_due),
        )
        return bill

    # === Payments ===

    async def record_payment(self, tenant: TenantContext, bill_id: int, data: PaymentCreate) -> Bill:
        """
        Append a payment and recompute balance and status atomically.

        The amount is validated against the balance as loaded; if another
        payment commits first the version check fails, the bill is reloaded
        and the amount validated again.
        """
        try:
            amount = to_money(data.amount)
        except InvalidOperation:
            # too many digits to quantize, never within the balance bounds
            amount = data.amount

        for attempt in range(1, MAX_PAYMENT_ATTEMPTS + 1):
            bill = await self.repo.get_bill(tenant.uid, bill_id, populate_existing=attempt > 1)
            if bill is None:
                raise BillNotFoundException(bill_id)

            balance_due = bill.balance_due
            if amount <= 0 or amount > balance_due:
                logger.warning(
                    "Rejected payment", tenant_id=tenant.uid, bill_id=bill_id,
                    amount=str(amount), balance_due=str(balance_due),
                )
                raise InvalidPaymentAmountException(amount, balance_due)

            payment = BillPayment(
                agency_id=tenant.uid,
                amount=amount,
                payment_date=data.payment_date or date.today(),
                note=data.note,
            )
            new_balance = balance_due - amount
            bill.balance_due = new_balance
            bill.status = status_for(new_balance).value

            try:
                await self.repo.add_payment(bill, payment)
                await self.repo.commit()
            except StaleDataError:
                await self.repo.rollback()
                logger.warning(
                    "Bill changed during payment, re-checking balance",
                    tenant_id=tenant.uid, bill_id=bill_id, attempt=attempt,
                )
                continue
            except SQLAlchemyError as e:
                await self.repo.rollback()
                logger.error("Failed to record payment", bill_id=bill_id, error=str(e), exc_info=True)
                raise StoreOperationException("record payment") from e

            logger.info(
                "Payment recorded", tenant_id=tenant.uid, bill_id=bill_id,
                amount=str(amount), balance_due=str(new_balance), status=bill.status,
            )
            return bill

        logger.error("Payment abandoned after repeated conflicts", tenant_id=tenant.uid, bill_id=bill_id)
        raise PaymentConflictException(bill_id)

    # === Reads ===

    async def get_bill(self, tenant: TenantContext, bill_id: int) -> Bill:
        bill = await self.repo.get_bill(tenant.uid, bill_id)
        if bill is None:
            raise BillNotFoundException(bill_id)
        return bill

    async def list_bills(
        self, tenant: TenantContext, status: Optional[BillStatus] = None,
        page: int = 1, per_page: int = 50,
    ) -> Tuple[List[Bill], int]:
        return await self.repo.list_bills(tenant.uid, status, page, per_page)

    async def invoice_pdf(self, tenant: TenantContext, bill_id: int) -> Tuple[str, bytes]:
        """Render the invoice PDF; returns (filename, content)."""
        bill = await self.get_bill(tenant, bill_id)
        content = render_invoice(bill, tenant)
        logger.info("Invoice rendered", tenant_id=tenant.uid, bill_id=bill_id, invoice_number=bill.invoice_number)
        return f"{bill.invoice_number}_{bill.trip_id}.pdf", content
