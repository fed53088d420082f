"""Billable sources

Read-only snapshots of the records that can produce an invoice line. Each
variant carries a ``kind`` tag so a ``BillableSource`` can be matched on
its variant and serialized unambiguously.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

from src.domain.service import BillingFrequency, ServiceCode


class SourceKind(str, Enum):
    ENROLLMENT = "enrollment"
    EVENT_ORDER = "event_order"
    HUB_SESSION = "hub_session"


class ServiceDefinition(BaseModel):
    """Service an enrollment belongs to"""

    code: str
    name: str
    billing_frequency: BillingFrequency = BillingFrequency.MONTHLY

    class Config:
        frozen = True

    @property
    def service_code(self) -> Optional[ServiceCode]:
        return ServiceCode.from_code(self.code)


class _SourceBase(BaseModel):
    id: int
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None

    class Config:
        frozen = True

    @property
    def item_id(self) -> str:
        return f"{self.kind}:{self.id}"

    @property
    def is_linked(self) -> bool:
        return self.customer_id is not None


class RecurringEnrollment(_SourceBase):
    """Active enrollment billed every period"""

    kind: Literal["enrollment"] = "enrollment"
    customer_id: int
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    service: ServiceDefinition
    hourly_rate: Optional[Decimal] = None
    hours_per_week: Optional[Decimal] = None
    weekly_tuition: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None
    class_title: Optional[str] = None

    @property
    def service_code(self) -> Optional[str]:
        return self.service.code


class EventOrderSource(_SourceBase):
    """Event registration awaiting an invoice; total_cents is authoritative"""

    kind: Literal["event_order"] = "event_order"
    event_title: str
    event_date: Optional[date] = None
    quantity: int = 1
    total_cents: int = Field(..., ge=0)

    @property
    def service_code(self) -> Optional[str]:
        return None


class HubSessionSource(_SourceBase):
    """One booked hub session"""

    kind: Literal["hub_session"] = "hub_session"
    student_name: str
    session_date: date
    daily_rate: Optional[Decimal] = None

    @property
    def service_code(self) -> Optional[str]:
        return ServiceCode.EATON_HUB.value


BillableSource = Annotated[
    Union[RecurringEnrollment, EventOrderSource, HubSessionSource],
    Field(discriminator="kind"),
]
