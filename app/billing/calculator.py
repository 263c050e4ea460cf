# app/billing/calculator.py

"""
Billing calculator.

Pure and deterministic: the same inputs always give the same breakdown, so
a stored bill can be re-derived and its invoice regenerated later.
compute() works on exact decimals and never rounds; settle() gives the
2-decimal amounts stored on a bill.

    totalKm        = max(0, closingKm - openingKm)
    baseAmount     = totalKm * ratePerKm
    extraKmAmount  = extraKm * ratePerKm
    extraHrsAmount = extraHours * extraHourCharge
    subTotal       = baseAmount + extraKmAmount + extraHrsAmount
                     + driverAllowance + tollParking + nightCharge
    gstAmount      = subTotal * gstPercent / 100 if gstEnabled else 0
    grandTotal     = subTotal + gstAmount
    balanceDue     = grandTotal - advance
"""

from dataclasses import dataclass
from decimal import Decimal

from app.billing.exceptions import InvalidBillInputException
from app.utils.general import to_money

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class BillCalculation:
    """Derived amounts of a bill"""
    total_km: Decimal
    base_amount: Decimal
    extra_km_amount: Decimal
    extra_hours_amount: Decimal
    sub_total: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    balance_due: Decimal


def validate_inputs(inputs) -> None:
    """
    Reject inputs that must never reach compute().

    Raises:
        InvalidBillInputException: closing below opening reading, or a
            negative amount
    """
    if inputs.closing_km < inputs.opening_km:
        raise InvalidBillInputException("Closing KM cannot be less than Opening KM")

    for field in (
        "opening_km", "closing_km", "rate_per_km", "extra_km", "extra_hours",
        "extra_hour_charge", "night_charge", "toll_parking", "driver_allowance",
        "advance", "gst_percent",
    ):
        if getattr(inputs, field) < 0:
            raise InvalidBillInputException(f"{field} cannot be negative")


def compute(inputs) -> BillCalculation:
    """Breakdown for one set of bill inputs (any object with the input fields)"""
    total_km = max(ZERO, Decimal(inputs.closing_km) - Decimal(inputs.opening_km))
    rate = Decimal(inputs.rate_per_km)

    base_amount = total_km * rate
    extra_km_amount = Decimal(inputs.extra_km) * rate
    extra_hours_amount = Decimal(inputs.extra_hours) * Decimal(inputs.extra_hour_charge)

    sub_total = (
        base_amount
        + extra_km_amount
        + extra_hours_amount
        + Decimal(inputs.driver_allowance)
        + Decimal(inputs.toll_parking)
        + Decimal(inputs.night_charge)
    )
    gst_amount = sub_total * Decimal(inputs.gst_percent) / HUNDRED if inputs.gst_enabled else ZERO
    grand_total = sub_total + gst_amount

    return BillCalculation(
        total_km=total_km,
        base_amount=base_amount,
        extra_km_amount=extra_km_amount,
        extra_hours_amount=extra_hours_amount,
        sub_total=sub_total,
        gst_amount=gst_amount,
        grand_total=grand_total,
        balance_due=grand_total - Decimal(inputs.advance),
    )


def settle(inputs) -> BillCalculation:
    """
    Breakdown as stored on a bill, re-derivable from the stored inputs.

    Each line amount is rounded to 2 decimals first; the sub total is the
    sum of those lines and the grand total is sub total plus the rounded
    GST, so the printed invoice always adds up.
    """
    exact = compute(inputs)
    base_amount = to_money(exact.base_amount)
    extra_km_amount = to_money(exact.extra_km_amount)
    extra_hours_amount = to_money(exact.extra_hours_amount)

    sub_total = (
        base_amount
        + extra_km_amount
        + extra_hours_amount
        + to_money(inputs.driver_allowance)
        + to_money(inputs.toll_parking)
        + to_money(inputs.night_charge)
    )
    gst_amount = to_money(sub_total * Decimal(inputs.gst_percent) / HUNDRED if inputs.gst_enabled else ZERO)
    grand_total = sub_total + gst_amount

    return BillCalculation(
        total_km=to_money(exact.total_km),
        base_amount=base_amount,
        extra_km_amount=extra_km_amount,
        extra_hours_amount=extra_hours_amount,
        sub_total=sub_total,
        gst_amount=gst_amount,
        grand_total=grand_total,
        balance_due=grand_total - to_money(inputs.advance),
    )
