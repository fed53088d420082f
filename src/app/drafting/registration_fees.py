"""Class registration fees

Monthly recurring invoices also carry the registration fee of any pending
class order placed by the same family. An order belongs to the family's
elective-class enrollment whose class title matches the event title
(case-insensitive, either one containing the other).
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence
from pydantic import BaseModel, Field

from libs.money import cents_to_dollars
from src.domain.service import ServiceCode
from .models import PricedItem
from .sources import RecurringEnrollment


class PendingRegistrationFee(BaseModel):
    """Class order awaiting its first invoice"""

    order_id: int
    customer_id: int
    event_title: str
    total_cents: int = Field(..., ge=0)

    class Config:
        frozen = True


class RegistrationFeeLine(BaseModel):
    """Registration fee to append to a customer's recurring invoice"""

    order_id: int
    customer_id: int
    description: str
    amount: Decimal = Field(..., ge=0)

    class Config:
        frozen = True


def elective_enrollments(items: Iterable[PricedItem]) -> List[RecurringEnrollment]:
    """Elective-class enrollments behind the given items that name a class"""
    return [
        item.source
        for item in items
        if isinstance(item.source, RecurringEnrollment)
        and item.source.service.service_code == ServiceCode.ELECTIVE_CLASSES
        and item.source.class_title
    ]


def titles_match(class_title: str, event_title: str) -> bool:
    class_title = class_title.lower()
    event_title = event_title.lower()
    return class_title in event_title or event_title in class_title


def _matching_enrollment(
    fee: PendingRegistrationFee, enrollments: Sequence[RecurringEnrollment]
) -> Optional[RecurringEnrollment]:
    for enrollment in enrollments:
        if enrollment.customer_id == fee.customer_id and titles_match(enrollment.class_title, fee.event_title):
            return enrollment
    return None


def match_registration_fees(
    items: Sequence[PricedItem], fees: Iterable[PendingRegistrationFee]
) -> List[RegistrationFeeLine]:
    """
    Pair pending class orders with the selected elective-class enrollments

    Orders with no matching enrollment of their own customer are left out
    and stay pending.
    """
    enrollments = elective_enrollments(items)
    lines = []
    for fee in fees:
        enrollment = _matching_enrollment(fee, enrollments)
        if enrollment is None:
            continue
        student = enrollment.student_name or "Student"
        lines.append(
            RegistrationFeeLine(
                order_id=fee.order_id,
                customer_id=fee.customer_id,
                description=f"{student} - Registration Fee: {fee.event_title}",
                amount=cents_to_dollars(fee.total_cents),
            )
        )
    return lines
