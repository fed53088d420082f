"""Invoice Domain Entity

Tracks customer invoices produced from enrollments, event orders and hub sessions.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, ForeignKey, Numeric, String, Date, Text
from src.domain.base import BaseModel, IdType, utc_now


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    VOID = "void"


class Invoice(BaseModel, table=True):
    """
    Invoice - Customer invoice for one family

    Domain Rules:
    - invoice_number must be unique
    - Status transitions: draft -> sent -> paid (or void)
    - total_amount is the sum of all invoice_lines.amount
    - period_start/period_end are set for recurring invoices only;
      event and hub invoices bill discrete bookings with no period
    - void invoices do not count when checking a period for duplicates
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_family_id', 'family_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_period', 'period_start', 'period_end'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    family_id: int = Field(
        sa_column=Column(IdType, ForeignKey("families.id", ondelete="CASCADE"), nullable=False),
        description="Family (customer) the invoice is addressed to"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-2025-000001)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, sent, paid, void)"
    )

    invoice_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Date the invoice was drafted"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Payment due date"
    )

    period_start: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Billing period start date (recurring invoices only)"
    )

    period_end: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Billing period end date (recurring invoices only)"
    )

    subtotal: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Sum of line amounts"
    )

    total_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Total invoice amount"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Note printed on the invoice (e.g., 'For January 2025')"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Last update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "family_id": 42,
                "invoice_number": "INV-2025-000001",
                "status": "draft",
                "invoice_date": "2025-01-03",
                "due_date": "2025-01-06",
                "period_start": "2025-01-01",
                "period_end": "2025-01-03",
                "subtotal": "260.00",
                "total_amount": "260.00",
                "notes": "For the week of 12/30/2024 - 01/03/2025",
            }
        }
