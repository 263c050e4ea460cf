# app/bookings/exceptions.py

"""
Custom exceptions for the bookings module.
"""

from fastapi import HTTPException, status


class BookingBaseException(HTTPException):
    """Base exception for all booking errors"""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=message)


class BookingNotFoundException(BookingBaseException):
    """Booking missing, or owned by another agency"""
    def __init__(self, booking_id: int):
        super().__init__(f"Booking not found: {booking_id}", status.HTTP_404_NOT_FOUND)


class InvalidTransitionException(BookingBaseException):
    """Lifecycle does not allow the event from the current status"""
    def __init__(self, current_status: str, event: str):
        super().__init__(
            f"Cannot {event} a booking that is {current_status}", status.HTTP_409_CONFLICT
        )


class MissingAssignmentException(BookingBaseException):
    """Driver or vehicle not supplied"""
    def __init__(self):
        super().__init__("Missing Assignment: driver and vehicle are both required")


class AssignmentTargetNotFoundException(BookingBaseException):
    """Driver, vehicle or agent is not on the agency's roster"""
    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind.capitalize()} not found: {record_id}", status.HTTP_404_NOT_FOUND)


class BookingConflictException(BookingBaseException):
    """Booking was changed by someone else in the meantime"""
    def __init__(self, booking_id: int):
        super().__init__(
            f"Booking {booking_id} was modified concurrently. Reload and retry.",
            status.HTTP_409_CONFLICT,
        )


class ShareLinkUnavailableException(BookingBaseException):
    """Nothing to share before a driver and vehicle are assigned"""
    def __init__(self, booking_id: int):
        super().__init__(f"Booking {booking_id} has no driver assigned yet")
