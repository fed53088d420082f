"""Hub Booking Domain Entity

A booked drop-in hub session, billed per session at a flat daily rate.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, IdType, utc_now


class HubBookingStatus(str, Enum):
    """Hub booking status"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELED = "canceled"


class HubBooking(BaseModel, table=True):
    """
    Hub Booking - One hub session for one student

    Domain Rules:
    - daily_rate NULL means the standard hub rate applies
    - family_id may be NULL until the booking is linked to a family
    - Billing a booking stamps invoice_id and moves it to completed
    """

    __tablename__ = "hub_bookings"
    __table_args__ = (
        Index('ix_hub_bookings_family_id', 'family_id'),
        Index('ix_hub_bookings_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique booking identifier (auto-increment)"
    )

    family_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("families.id", ondelete="SET NULL"), nullable=True),
        description="Linked family (NULL while unlinked)"
    )

    student_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Student attending the session"
    )

    invitee_email: Optional[str] = Field(
        default=None,
        description="Email used to book the session"
    )

    session_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Session date"
    )

    daily_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Session rate (NULL = standard rate)"
    )

    status: HubBookingStatus = Field(
        default=HubBookingStatus.SCHEDULED,
        description="Booking status"
    )

    invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True),
        description="Invoice this session was billed on"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Booking timestamp"
    )
