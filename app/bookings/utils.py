# app/bookings/utils.py

from urllib.parse import quote

from app.bookings.models import Booking
from app.utils.general import fill_if_missing, random_reference

TRIP_ID_PREFIX = "TRIP"


def generate_trip_id() -> str:
    """TRIP-<1000..9999>, uniqueness is checked by the caller"""
    return random_reference(TRIP_ID_PREFIX)


def build_trip_confirmation(booking: Booking, agency_name: str) -> str:
    """Trip confirmation text shared with the client and driver"""
    snapshot = booking.assignment
    when = booking.trip_date.isoformat()
    if booking.trip_time:
        when = f"{when} at {booking.trip_time}"

    return (
        f"*Trip Confirmation - {agency_name}*\n\n"
        f"🆔 Trip ID: {booking.trip_id}\n"
        f"👤 Client: {fill_if_missing(booking.client_name, 'Unknown')}\n"
        f"📍 Pickup: {booking.pickup}\n"
        f"🏁 Drop: {booking.drop}\n"
        f"📅 Date: {when}\n\n"
        "*Driver Details:*\n"
        f"🚗 Car: {fill_if_missing(snapshot.vehicle_model, 'N/A')} ({snapshot.vehicle_number})\n"
        f"👨 Driver: {snapshot.driver_name}\n"
        f"📞 Contact: {fill_if_missing(snapshot.driver_mobile, 'N/A')}"
    )


def generate_whatsapp_link(message: str) -> str:
    """wa.me link that opens WhatsApp with the message prefilled"""
    return f"https://wa.me/?text={quote(message)}"
