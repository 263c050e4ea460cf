# app/roster/models.py

"""
Roster models - SQLAlchemy 2.x

Flat, tenant-scoped records the bookings are built from: clients, drivers,
vehicles and agents. Bookings only keep a snapshot of what they copy from
here, so editing or deleting a roster record never rewrites history.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base
from app.agencies.models import TenantMixin


class Client(Base, TenantMixin):
    """Customer who books trips"""
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}')>"


class Driver(Base, TenantMixin):
    """Driver on the agency's roster"""
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mobile: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    license_number: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, comment="Stored upper-cased"
    )
    address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name='{self.name}')>"


class Vehicle(Base, TenantMixin):
    """Vehicle in the agency's fleet"""
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    number: Mapped[str] = mapped_column(String(32), nullable=False, comment="Registration number")
    model: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    vehicle_type: Mapped[str] = mapped_column(String(32), nullable=False, default="Sedan")
    owner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, number='{self.number}')>"


class Agent(Base, TenantMixin):
    """Partner agent who refers bookings"""
    __tablename__ = "agents"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    agency_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    office_city: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, name='{self.name}')>"
