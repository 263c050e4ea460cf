# app/agencies/schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TokenResponse(BaseModel):
    """Schema for token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: EmailStr
    password: str


class AgencyCreate(BaseModel):
    """Schema for provisioning a new agency account."""
    agency_name: str = Field(..., min_length=1, max_length=255)
    owner_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    mobile: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=512)
    plan: str = "Standard"


class AgencyResponse(BaseModel):
    """Schema for agency profile response."""
    id: str
    agency_name: str
    owner_name: str
    email: EmailStr
    mobile: Optional[str] = None
    address: Optional[str] = None
    plan: str
    last_login: Optional[datetime] = None
    created_on: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
