# app/billing/models.py

"""
Billing models - SQLAlchemy 2.x

- Bill: computed invoice of a completed trip. Inputs and the derived
  breakdown are both stored; the breakdown is always re-derivable.
- BillPayment: append-only payments against a bill.

Invariant: grand_total - advance - sum(payments.amount) == balance_due,
and status is Paid exactly when balance_due <= 0.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db import Base
from app.agencies.models import TenantMixin, utc_now
from app.bookings.models import Booking


# === Enums ===

class BillStatus(str, PyEnum):
    """Derived from balance_due, never set directly"""
    DUE = "Due"
    PAID = "Paid"


def status_for(balance_due: Decimal) -> BillStatus:
    return BillStatus.PAID if balance_due <= 0 else BillStatus.DUE


# === Bill Model ===

class Bill(Base, TenantMixin):
    """Computed bill of one completed booking"""
    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    booking_id: Mapped[int] = mapped_column(
        ForeignKey("bookings.id"), nullable=False, unique=True,
        comment="A booking is billed exactly once"
    )
    trip_id: Mapped[str] = mapped_column(String(16), nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Unknown")
    invoice_number: Mapped[str] = mapped_column(
        String(16), nullable=False, comment="INV-<4 digits>, fixed at creation"
    )

    # --- Operator inputs ---
    opening_km: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    closing_km: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    rate_per_km: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    extra_km: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    extra_hours: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    extra_hour_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    night_charge: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    toll_parking: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    driver_allowance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    advance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    gst_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gst_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))

    # --- Derived breakdown ---
    total_km: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    base_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    extra_km_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    extra_hours_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    sub_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    gst_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    balance_due: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(8), nullable=False, default=BillStatus.DUE.value, index=True)

    version_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    booking: Mapped[Booking] = relationship(lazy="selectin")
    payments: Mapped[List["BillPayment"]] = relationship(
        back_populates="bill", lazy="selectin", order_by="BillPayment.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def amount_paid(self) -> Decimal:
        """Advance plus every recorded payment"""
        return self.grand_total - self.balance_due

    @property
    def payments_total(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))

    def __repr__(self) -> str:
        return f"<Bill(id={self.id}, trip_id='{self.trip_id}', balance_due={self.balance_due})>"


# === Bill Payment Model ===

class BillPayment(Base, TenantMixin):
    """Partial payment received against a bill"""
    __tablename__ = "bill_payments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    bill_id: Mapped[int] = mapped_column(
        ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    bill: Mapped[Bill] = relationship(back_populates="payments")

    def __repr__(self) -> str:
        return f"<BillPayment(id={self.id}, bill_id={self.bill_id}, amount={self.amount})>"
