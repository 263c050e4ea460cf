# app/billing/exceptions.py

"""
Custom exceptions for the billing module.
"""

from decimal import Decimal

from fastapi import HTTPException, status


class BillingBaseException(HTTPException):
    """Base exception for all billing errors"""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=message)


class InvalidBillInputException(BillingBaseException):
    """Bill inputs failed validation"""
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class BillNotFoundException(BillingBaseException):
    """Bill missing, or owned by another agency"""
    def __init__(self, bill_id: int):
        super().__init__(f"Bill not found: {bill_id}", status.HTTP_404_NOT_FOUND)


class BookingNotBillableException(BillingBaseException):
    """Only Completed bookings can be billed"""
    def __init__(self, booking_id: int, current_status: str):
        super().__init__(
            f"Booking {booking_id} is {current_status}; only Completed trips can be billed",
            status.HTTP_409_CONFLICT,
        )


class BillAlreadyExistsException(BillingBaseException):
    """A booking is billed exactly once"""
    def __init__(self, booking_id: int):
        super().__init__(f"Booking {booking_id} has already been billed", status.HTTP_409_CONFLICT)


class InvalidPaymentAmountException(BillingBaseException):
    """Payment is not positive or exceeds the balance due"""
    def __init__(self, amount: Decimal, balance_due: Decimal):
        if balance_due <= 0:
            reason = "no balance remains on this bill"
        elif amount <= 0:
            reason = "amount must be greater than zero"
        else:
            reason = f"amount exceeds balance due of {balance_due}"
        super().__init__(f"Invalid payment amount: {amount} ({reason})", status.HTTP_400_BAD_REQUEST)


class PaymentConflictException(BillingBaseException):
    """Bill kept changing underneath the payment"""
    def __init__(self, bill_id: int):
        super().__init__(
            f"Bill {bill_id} is being updated by another payment. Please retry.",
            status.HTTP_409_CONFLICT,
        )
