# app/bookings/models.py

"""
Booking model - SQLAlchemy 2.x

One trip request moving through Pending -> Assigned -> Completed -> Billed
(or Pending -> Cancelled). The assigned driver, vehicle and agent are kept
as a snapshot of the roster at assignment time, not as live references.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base
from app.agencies.models import TenantMixin


# === Enums ===

class BookingStatus(str, PyEnum):
    """Lifecycle states of a booking"""
    PENDING = "Pending"
    ASSIGNED = "Assigned"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    BILLED = "Billed"


class TripType(str, PyEnum):
    """Kinds of trips an agency sells"""
    ONE_WAY = "One Way"
    ROUND_TRIP = "Round Trip"
    RENTAL_8HR = "Rental (8hr/80km)"
    RENTAL_12HR = "Rental (12hr/300km)"
    OUTSTATION = "Outstation"


# === Assignment Snapshot ===

@dataclass(frozen=True)
class AssignmentSnapshot:
    """Driver, vehicle and agent as they were when the booking was assigned"""
    driver_id: int
    driver_name: str
    driver_mobile: Optional[str]
    vehicle_id: int
    vehicle_number: str
    vehicle_model: Optional[str]
    agent_id: Optional[int] = None
    agent_name: Optional[str] = None


class Booking(Base, TenantMixin):
    """Trip request owned by one agency"""
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    trip_id: Mapped[str] = mapped_column(
        String(16), nullable=False, index=True,
        comment="Human readable id, TRIP-<4 digits>"
    )

    # --- Client snapshot ---
    client_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Unknown")
    client_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # --- Trip details ---
    pickup: Mapped[str] = mapped_column(String(512), nullable=False)
    drop: Mapped[str] = mapped_column("drop_location", String(512), nullable=False)
    trip_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    trip_time: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    trip_type: Mapped[str] = mapped_column(String(32), nullable=False, default=TripType.ONE_WAY.value)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=BookingStatus.PENDING.value, index=True
    )

    # --- Assignment snapshot, empty until assigned ---
    assigned_driver_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    assigned_driver_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    assigned_driver_mobile: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    assigned_vehicle_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    assigned_vehicle_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    assigned_vehicle_model: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    assigned_agent_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, comment="Null for direct bookings"
    )
    assigned_agent_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    version_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def assignment(self) -> Optional[AssignmentSnapshot]:
        """The assignment snapshot, or None while unassigned"""
        if self.assigned_driver_id is None or self.assigned_vehicle_id is None:
            return None
        return AssignmentSnapshot(
            driver_id=self.assigned_driver_id,
            driver_name=self.assigned_driver_name,
            driver_mobile=self.assigned_driver_mobile,
            vehicle_id=self.assigned_vehicle_id,
            vehicle_number=self.assigned_vehicle_number,
            vehicle_model=self.assigned_vehicle_model,
            agent_id=self.assigned_agent_id,
            agent_name=self.assigned_agent_name,
        )

    def apply_assignment(self, snapshot: AssignmentSnapshot) -> None:
        """Copy a snapshot onto the booking columns"""
        self.assigned_driver_id = snapshot.driver_id
        self.assigned_driver_name = snapshot.driver_name
        self.assigned_driver_mobile = snapshot.driver_mobile
        self.assigned_vehicle_id = snapshot.vehicle_id
        self.assigned_vehicle_number = snapshot.vehicle_number
        self.assigned_vehicle_model = snapshot.vehicle_model
        self.assigned_agent_id = snapshot.agent_id
        self.assigned_agent_name = snapshot.agent_name

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, trip_id='{self.trip_id}', status='{self.status}')>"
