# app/bookings/schemas.py

"""
Pydantic schemas for the bookings module.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.bookings.models import BookingStatus, TripType


class BookingCreate(BaseModel):
    """Schema for creating a booking"""
    client_id: int = Field(..., gt=0)
    client_phone: Optional[str] = Field(None, max_length=32, description="Defaults to the client's mobile")
    pickup: str = Field(..., min_length=1, max_length=512)
    drop: str = Field(..., min_length=1, max_length=512)
    trip_date: date
    trip_time: Optional[str] = Field(None, max_length=8, description="HH:MM")
    trip_type: TripType = TripType.ONE_WAY
    notes: Optional[str] = None


class AssignmentRequest(BaseModel):
    """Driver and vehicle to bind to a booking, agent optional"""
    driver_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    agent_id: Optional[int] = None


class AssignmentResponse(BaseModel):
    """Snapshot of the assignment as shown on the booking"""
    driver_id: int
    driver_name: str
    driver_mobile: Optional[str] = None
    vehicle_id: int
    vehicle_number: str
    vehicle_model: Optional[str] = None
    agent_id: Optional[int] = None
    agent_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    """Schema for booking response"""
    id: int
    trip_id: str
    client_id: Optional[int] = None
    client_name: str
    client_phone: Optional[str] = None
    pickup: str
    drop: str
    trip_date: date
    trip_time: Optional[str] = None
    trip_type: str
    notes: Optional[str] = None
    status: BookingStatus
    assignment: Optional[AssignmentResponse] = None
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaginatedBookingResponse(BaseModel):
    """Paginated booking listing"""
    items: List[BookingResponse]
    total_items: int
    page: int
    per_page: int
    total_pages: int


class ShareLinkResponse(BaseModel):
    """WhatsApp trip-confirmation link"""
    booking_id: int
    trip_id: str
    message: str
    url: str
