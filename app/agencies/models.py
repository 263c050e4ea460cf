# app/agencies/models.py

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.ext.declarative import declared_attr
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db import Base


def utc_now() -> datetime:
    """Timestamp used for every created/updated column"""
    return datetime.now(timezone.utc)


# --- Mixins ---
class TimestampMixin:
    """Mixin for audit timestamps, filled on the Python side."""

    @declared_attr
    def created_on(cls):
        """
        Column for the timestamp when this record was created
        """
        return Column(
            DateTime(timezone=True),
            default=utc_now,
            nullable=False,
            comment="Timestamp when this record was created",
        )

    @declared_attr
    def updated_on(cls):
        """
        Column for the timestamp when this record was last updated
        """
        return Column(
            DateTime(timezone=True),
            default=utc_now,
            onupdate=utc_now,
            nullable=False,
            comment="Timestamp when this record was last updated",
        )


class TenantMixin(TimestampMixin):
    """Mixin for records owned by exactly one agency."""

    @declared_attr
    def agency_id(cls):
        """
        Column for the owning agency (tenant)
        """
        return Column(
            String(36),
            ForeignKey("agencies.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
            comment="Owning agency (tenant uid)",
        )
# --- End of Mixins ---


class Agency(Base, TimestampMixin):
    """Agency (tenant) account"""
    __tablename__ = "agencies"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
        comment="Tenant uid, prefixes every scoped query"
    )
    agency_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    plan: Mapped[str] = mapped_column(String(32), nullable=False, default="Standard")
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    token_version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Bumped on sign-out to invalidate issued tokens"
    )
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Agency(id='{self.id}', agency_name='{self.agency_name}')>"
