"""Service Domain Entity

Catalog of billable service types and how each is billed.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, Numeric, String
from src.domain.base import BaseModel, IdType, utc_now


class ServiceCode(str, Enum):
    """Known service codes"""
    ACADEMIC_COACHING = "academic_coaching"  # hourly coaching
    EATON_ONLINE = "eaton_online"            # weekly tuition
    LEARNING_POD = "learning_pod"            # per-session pod, billed monthly
    CONSULTING = "consulting"
    EATON_HUB = "eaton_hub"                  # per-session drop-in hub
    ELECTIVE_CLASSES = "elective_classes"

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["ServiceCode"]:
        """Map a stored code to the enum, None for codes this service does not know"""
        try:
            return cls(code)
        except ValueError:
            return None


class BillingFrequency(str, Enum):
    """How often a service is billed"""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    BI_MONTHLY = "bi_monthly"
    ANNUAL = "annual"
    ONE_TIME = "one_time"
    PER_SESSION = "per_session"


class Service(BaseModel, table=True):
    """
    Service - Billable service definition

    Domain Rules:
    - code is unique
    - billing_frequency decides which enrollment rate field is active
    """

    __tablename__ = "services"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique service identifier (auto-increment)"
    )

    code: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Service code (e.g., 'academic_coaching')"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name (e.g., 'Academic Coaching')"
    )

    billing_frequency: BillingFrequency = Field(
        default=BillingFrequency.MONTHLY,
        description="Billing frequency"
    )

    default_customer_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Default customer rate for new enrollments"
    )

    is_active: bool = Field(
        default=True,
        description="Whether the service is offered"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Creation timestamp"
    )
