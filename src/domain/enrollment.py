"""Enrollment Domain Entity

A student's (or family's) enrollment in a service, with its billing rates.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, IdType, utc_now


class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle status"""
    TRIAL = "trial"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


class Enrollment(BaseModel, table=True):
    """
    Enrollment - Recurring billable relationship

    Domain Rules:
    - Belongs to one family, optionally one student
    - Exactly one rate set is active, chosen by the service code/frequency:
      hourly_rate_customer x hours_per_week, weekly_tuition, monthly_rate or daily_rate
    - Only active enrollments are billable
    """

    __tablename__ = "enrollments"
    __table_args__ = (
        Index('ix_enrollments_family_id', 'family_id'),
        Index('ix_enrollments_service_id', 'service_id'),
        Index('ix_enrollments_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique enrollment identifier (auto-increment)"
    )

    family_id: int = Field(
        sa_column=Column(IdType, ForeignKey("families.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Family"
    )

    student_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("students.id", ondelete="CASCADE"), nullable=True),
        description="Foreign key to Student (optional)"
    )

    service_id: int = Field(
        sa_column=Column(IdType, ForeignKey("services.id"), nullable=False),
        description="Foreign key to Service"
    )

    status: EnrollmentStatus = Field(
        default=EnrollmentStatus.ACTIVE,
        description="Enrollment status"
    )

    start_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Enrollment start date"
    )

    hourly_rate_customer: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Hourly rate charged to the family"
    )

    hours_per_week: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(6, 2), nullable=True),
        description="Hours per week"
    )

    weekly_tuition: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Weekly tuition"
    )

    monthly_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Monthly rate"
    )

    daily_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
        description="Daily / per-session rate"
    )

    class_title: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Class title for elective enrollments"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Creation timestamp"
    )
