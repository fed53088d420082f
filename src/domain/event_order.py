"""Event Order Domain Entity

Ticket purchase for a single event, billed on an invoice rather than paid online.
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, Date, ForeignKey, Integer, String
from src.domain.base import BaseModel, IdType, utc_now


class EventOrderPaymentStatus(str, Enum):
    """Event order payment status"""
    PENDING = "pending"
    STEPUP_PENDING = "stepup_pending"  # class registration awaiting the monthly invoice
    PAID = "paid"
    REFUNDED = "refunded"


class EventType(str, Enum):
    """Kind of event an order was placed for"""
    EVENT = "event"
    CLASS = "class"


class EventOrder(BaseModel, table=True):
    """
    Event Order - One-off registration awaiting invoicing

    Domain Rules:
    - total_cents is authoritative; the unit price is derived from it
    - family_id may be NULL until an operator links the purchaser to a family
    - invoice_id is set once the order is billed; billed orders are never re-offered
    - class orders in stepup_pending are billed as registration fees on the
      family's monthly invoice, never on their own
    """

    __tablename__ = "event_orders"
    __table_args__ = (
        Index('ix_event_orders_family_id', 'family_id'),
        Index('ix_event_orders_invoice_id', 'invoice_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique event order identifier (auto-increment)"
    )

    event_title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Title of the event"
    )

    event_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Date of the event"
    )

    event_type: EventType = Field(
        default=EventType.EVENT,
        description="Event or class"
    )

    family_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("families.id", ondelete="SET NULL"), nullable=True),
        description="Linked family (NULL while the purchaser is unlinked)"
    )

    purchaser_name: Optional[str] = Field(
        default=None,
        description="Purchaser name as entered at checkout"
    )

    purchaser_email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Purchaser email as entered at checkout"
    )

    quantity: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Ticket count"
    )

    total_cents: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Total charge in cents"
    )

    payment_status: EventOrderPaymentStatus = Field(
        default=EventOrderPaymentStatus.PENDING,
        description="Payment status"
    )

    invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True),
        description="Invoice this order was billed on"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Order timestamp"
    )
