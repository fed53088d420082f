"""Student Domain Entity"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, ForeignKey, String
from src.domain.base import BaseModel, IdType, utc_now


class Student(BaseModel, table=True):
    """Student - Child of a family, optionally attached to enrollments"""

    __tablename__ = "students"
    __table_args__ = (
        Index('ix_students_family_id', 'family_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique student identifier (auto-increment)"
    )

    family_id: int = Field(
        sa_column=Column(IdType, ForeignKey("families.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Family"
    )

    full_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Student full name"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Creation timestamp"
    )
