# app/billing/schemas.py

"""
Pydantic schemas for the billing module.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import settings
from app.billing.models import BillStatus


# Inputs match the Numeric(12, 2) columns they are stored in
MONEY_DIGITS = 12


# === Bill Inputs ===

class BillInputs(BaseModel):
    """Operator-entered values of the bill form"""
    opening_km: Decimal = Field(..., ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    closing_km: Decimal = Field(..., ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    rate_per_km: Decimal = Field(
        default_factory=lambda: settings.default_rate_per_km, ge=0, max_digits=MONEY_DIGITS, decimal_places=2
    )
    extra_km: Decimal = Field(Decimal("0"), ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    extra_hours: Decimal = Field(Decimal("0"), ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    extra_hour_charge: Decimal = Field(Decimal("0"), ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    night_charge: Decimal = Field(Decimal("0"), ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    toll_parking: Decimal = Field(Decimal("0"), ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    driver_allowance: Decimal = Field(
        default_factory=lambda: settings.default_driver_allowance, ge=0, max_digits=MONEY_DIGITS, decimal_places=2
    )
    advance: Decimal = Field(Decimal("0"), ge=0, max_digits=MONEY_DIGITS, decimal_places=2)
    gst_enabled: bool = Field(default_factory=lambda: settings.default_gst_enabled)
    gst_percent: Decimal = Field(
        default_factory=lambda: settings.default_gst_percent, ge=0, le=100, max_digits=5, decimal_places=2
    )


class BillCalculationResponse(BaseModel):
    """Breakdown produced by the calculator"""
    total_km: Decimal
    base_amount: Decimal
    extra_km_amount: Decimal
    extra_hours_amount: Decimal
    sub_total: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    balance_due: Decimal

    model_config = ConfigDict(from_attributes=True)


class BillPreviewResponse(BaseModel):
    """Live calculation, nothing persisted"""
    inputs: BillInputs
    calculation: BillCalculationResponse


class BillCreate(BaseModel):
    """Schema for billing a completed booking"""
    booking_id: int = Field(..., gt=0)
    inputs: BillInputs


# === Payments ===

class PaymentCreate(BaseModel):
    """Partial payment against a bill; bounds are checked against the live balance"""
    amount: Decimal
    note: Optional[str] = Field(None, max_length=512)
    payment_date: Optional[date] = None


class PaymentResponse(BaseModel):
    id: int
    amount: Decimal
    payment_date: date
    note: Optional[str] = None
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)


# === Bills ===

class BillResponse(BaseModel):
    """Schema for bill response"""
    id: int
    booking_id: int
    trip_id: str
    client_name: str
    invoice_number: str

    opening_km: Decimal
    closing_km: Decimal
    rate_per_km: Decimal
    extra_km: Decimal
    extra_hours: Decimal
    extra_hour_charge: Decimal
    night_charge: Decimal
    toll_parking: Decimal
    driver_allowance: Decimal
    advance: Decimal
    gst_enabled: bool
    gst_percent: Decimal

    total_km: Decimal
    base_amount: Decimal
    extra_km_amount: Decimal
    extra_hours_amount: Decimal
    sub_total: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    status: BillStatus

    payments: List[PaymentResponse] = []
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaginatedBillResponse(BaseModel):
    """Paginated bill listing"""
    items: List[BillResponse]
    total_items: int
    page: int
    per_page: int
    total_pages: int
