import pytest

from app.bookings.exceptions import InvalidTransitionException
from app.bookings.lifecycle import BookingEvent, TERMINAL_STATES, TRANSITIONS, can_apply, next_status
from app.bookings.models import BookingStatus


@pytest.mark.parametrize("current, event, expected", [
    (BookingStatus.PENDING, BookingEvent.ASSIGN, BookingStatus.ASSIGNED),
    (BookingStatus.PENDING, BookingEvent.CANCEL, BookingStatus.CANCELLED),
    (BookingStatus.ASSIGNED, BookingEvent.COMPLETE, BookingStatus.COMPLETED),
    (BookingStatus.COMPLETED, BookingEvent.BILL, BookingStatus.BILLED),
])
def test_allowed_transitions(current, event, expected):
    assert next_status(current, event) == expected


def test_accepts_stored_string_status():
    assert next_status("Pending", BookingEvent.ASSIGN) == BookingStatus.ASSIGNED


@pytest.mark.parametrize("current, event", [
    (BookingStatus.PENDING, BookingEvent.COMPLETE),
    (BookingStatus.PENDING, BookingEvent.BILL),
    (BookingStatus.ASSIGNED, BookingEvent.CANCEL),
    (BookingStatus.ASSIGNED, BookingEvent.BILL),
    (BookingStatus.COMPLETED, BookingEvent.ASSIGN),
])
def test_illegal_transitions_raise_conflict(current, event):
    with pytest.raises(InvalidTransitionException) as exc_info:
        next_status(current, event)
    assert exc_info.value.status_code == 409


def test_terminal_states_have_no_outgoing_edges():
    for state in TERMINAL_STATES:
        for event in BookingEvent:
            assert not can_apply(state, event)
    assert all(source not in TERMINAL_STATES for source, _ in TRANSITIONS)
