"""Invoice Line Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, IdType, utc_now


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - amount = quantity * unit_price, rounded to cents
    - enrollment_id is set for recurring lines only
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
        Index('ix_invoice_lines_enrollment_id', 'enrollment_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice line identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    enrollment_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("enrollments.id"), nullable=True),
        description="Enrollment billed by this line (recurring lines only)"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item description (e.g., 'Ava Smith - Academic Coaching: 4 hrs × $65.00')"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Quantity (hours, weeks, sessions, tickets)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Price per unit"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Line total (quantity * unit_price)"
    )

    sort_order: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Display order within the invoice"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Creation timestamp"
    )
