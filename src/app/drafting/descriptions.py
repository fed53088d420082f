"""Line item descriptions

Descriptions reflect the final quantity and unit price, so a "bill 3 weeks"
multiplier reads "3 weeks × $150.00" on the invoice.
"""

from datetime import date
from decimal import Decimal

from libs.money import round2
from src.domain.service import BillingFrequency, ServiceCode
from .sources import BillableSource, EventOrderSource, HubSessionSource, RecurringEnrollment

HUB_SESSION_LABEL = "Eaton Hub"


def format_quantity(quantity: Decimal) -> str:
    return format(quantity.normalize(), "f")


def format_rate(unit_price: Decimal) -> str:
    return f"${round2(unit_price):.2f}"


def format_short_date(day: date) -> str:
    return f"{day:%b} {day.day}, {day.year}"


def build_description(source: BillableSource, quantity: Decimal, unit_price: Decimal) -> str:
    if isinstance(source, RecurringEnrollment):
        return _enrollment_description(source, quantity, unit_price)

    if isinstance(source, EventOrderSource):
        when = f" ({format_short_date(source.event_date)})" if source.event_date else ""
        text = f"{source.event_title}{when} - Registration Fee"
        if quantity != 1:
            text += f": {format_quantity(quantity)} tickets"
        elif source.quantity > 1:
            # Billed as one line for the whole charge
            text += f": {source.quantity} tickets"
        return text

    if isinstance(source, HubSessionSource):
        return f"{source.student_name} - {HUB_SESSION_LABEL} ({format_short_date(source.session_date)})"

    raise TypeError(f"Unsupported billable source: {type(source).__name__}")


def _enrollment_description(
    enrollment: RecurringEnrollment, quantity: Decimal, unit_price: Decimal
) -> str:
    student = enrollment.student_name or "Unknown Student"
    prefix = f"{student} - {enrollment.service.name or 'Service'}"
    code = enrollment.service.service_code
    qty = format_quantity(quantity)
    rate = format_rate(unit_price)

    if code == ServiceCode.ACADEMIC_COACHING:
        return f"{prefix}: {qty} hrs × {rate}"

    if code == ServiceCode.EATON_ONLINE or enrollment.service.billing_frequency == BillingFrequency.WEEKLY:
        if quantity == 1:
            return f"{prefix}: {rate}/week"
        return f"{prefix}: {qty} weeks × {rate}"

    if code == ServiceCode.LEARNING_POD:
        if quantity == 1:
            return prefix
        return f"{prefix}: {qty} sessions × {rate}"

    if quantity != 1:
        return f"{prefix}: {qty} × {rate}"
    return prefix
