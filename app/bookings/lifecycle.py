# app/bookings/lifecycle.py

"""
Booking state machine.

    Pending  --assign-->   Assigned
    Pending  --cancel-->   Cancelled
    Assigned --complete--> Completed
    Completed --bill-->    Billed

Cancelled and Billed are terminal.
"""

from enum import Enum
from typing import Dict, Tuple, Union

from app.bookings.exceptions import InvalidTransitionException
from app.bookings.models import BookingStatus


class BookingEvent(str, Enum):
    """Events an operator (or billing) can apply to a booking"""
    ASSIGN = "assign"
    CANCEL = "cancel"
    COMPLETE = "complete"
    BILL = "bill"


TRANSITIONS: Dict[Tuple[BookingStatus, BookingEvent], BookingStatus] = {
    (BookingStatus.PENDING, BookingEvent.ASSIGN): BookingStatus.ASSIGNED,
    (BookingStatus.PENDING, BookingEvent.CANCEL): BookingStatus.CANCELLED,
    (BookingStatus.ASSIGNED, BookingEvent.COMPLETE): BookingStatus.COMPLETED,
    (BookingStatus.COMPLETED, BookingEvent.BILL): BookingStatus.BILLED,
}

TERMINAL_STATES = frozenset({BookingStatus.CANCELLED, BookingStatus.BILLED})


def next_status(current: Union[str, BookingStatus], event: BookingEvent) -> BookingStatus:
    """
    Status reached by applying `event` in state `current`.

    Raises:
        InvalidTransitionException: the lifecycle has no such edge
    """
    current = BookingStatus(current)
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransitionException(current.value, event.value) from None


def can_apply(current: Union[str, BookingStatus], event: BookingEvent) -> bool:
    return (BookingStatus(current), event) in TRANSITIONS
