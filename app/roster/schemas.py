# app/roster/schemas.py

"""
Pydantic schemas for the roster module.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# === Enums ===

class RosterKind(str, Enum):
    """Kinds of roster records"""
    CLIENT = "client"
    DRIVER = "driver"
    VEHICLE = "vehicle"
    AGENT = "agent"


class VehicleType(str, Enum):
    """Vehicle body types offered by agencies"""
    SEDAN = "Sedan"
    SUV = "SUV"
    HATCHBACK = "Hatchback"
    MUV = "MUV"
    TEMPO_TRAVELLER = "Tempo Traveller"
    BUS = "Bus"


# === Client Schemas ===

class ClientCreate(BaseModel):
    """Schema for creating a client"""
    name: str = Field(..., min_length=1, max_length=255)
    mobile: Optional[str] = Field(None, max_length=32)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=512)


class ClientUpdate(BaseModel):
    """Partial update of a client"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    mobile: Optional[str] = Field(None, max_length=32)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=512)


class ClientResponse(ClientCreate):
    id: int
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# === Driver Schemas ===

class DriverCreate(BaseModel):
    """Schema for creating a driver"""
    name: str = Field(..., min_length=1, max_length=255)
    mobile: Optional[str] = Field(None, max_length=32)
    license_number: Optional[str] = Field(None, max_length=64)
    address: Optional[str] = Field(None, max_length=512)

    @field_validator("license_number")
    @classmethod
    def upper_license(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value else value


class DriverUpdate(DriverCreate):
    """Partial update of a driver"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class DriverResponse(DriverCreate):
    id: int
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# === Vehicle Schemas ===

class VehicleCreate(BaseModel):
    """Schema for creating a vehicle"""
    number: str = Field(..., min_length=1, max_length=32)
    model: Optional[str] = Field(None, max_length=128)
    vehicle_type: VehicleType = VehicleType.SEDAN
    owner: Optional[str] = Field(None, max_length=255)


class VehicleUpdate(BaseModel):
    """Partial update of a vehicle"""
    number: Optional[str] = Field(None, min_length=1, max_length=32)
    model: Optional[str] = Field(None, max_length=128)
    vehicle_type: Optional[VehicleType] = None
    owner: Optional[str] = Field(None, max_length=255)


class VehicleResponse(VehicleCreate):
    id: int
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# === Agent Schemas ===

class AgentCreate(BaseModel):
    """Schema for creating an agent"""
    name: str = Field(..., min_length=1, max_length=255)
    agency_name: Optional[str] = Field(None, max_length=255)
    mobile: Optional[str] = Field(None, max_length=32)
    office_city: Optional[str] = Field(None, max_length=128)


class AgentUpdate(AgentCreate):
    """Partial update of an agent"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class AgentResponse(AgentCreate):
    id: int
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
