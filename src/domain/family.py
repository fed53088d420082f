"""Family Domain Entity

A family is the billing customer: every invoice belongs to exactly one family.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, String
from src.domain.base import BaseModel, IdType, utc_now


class FamilyStatus(str, Enum):
    """Family lifecycle status"""
    LEAD = "lead"
    ACTIVE = "active"
    INACTIVE = "inactive"
    WITHDRAWN = "withdrawn"


class Family(BaseModel, table=True):
    """
    Family - Billing customer

    Domain Rules:
    - Only active families are offered for recurring invoice drafts
    - display_name is used for sorting draft groups
    """

    __tablename__ = "families"
    __table_args__ = (
        Index('ix_families_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique family identifier (auto-increment)"
    )

    display_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name (e.g., 'Smith, Jane')"
    )

    status: FamilyStatus = Field(
        default=FamilyStatus.ACTIVE,
        description="Family status (lead, active, inactive, withdrawn)"
    )

    primary_email: Optional[str] = Field(
        default=None,
        description="Primary billing email"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Creation timestamp"
    )
