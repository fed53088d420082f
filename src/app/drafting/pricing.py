"""Pricing resolver

Turns one billable source into its base (quantity, unit_price) pair.

| Source                                   | quantity        | unit_price                     |
|------------------------------------------|-----------------|--------------------------------|
| enrollment, hourly coaching              | hours per week  | hourly rate                    |
| enrollment, learning pod                 | 1               | daily rate                     |
| enrollment, hub or per-session frequency | 1               | daily rate (100 when unset)    |
| enrollment, online or weekly frequency   | 1               | weekly tuition                 |
| enrollment, anything else                | 1               | monthly rate                   |
| event order                              | ticket quantity | total charge / quantity        |
| event order, charge not divisible        | 1               | total charge                   |
| hub session                              | 1               | daily rate (100 when unset)    |

Missing rates resolve to 0, except the hub session rate.
"""

from decimal import Decimal
from typing import Optional

from libs.money import cents_to_dollars, multiply_money, round2, to_money
from src.domain.service import BillingFrequency, ServiceCode
from .models import PriceQuote
from .sources import BillableSource, EventOrderSource, HubSessionSource, RecurringEnrollment

DEFAULT_HUB_SESSION_RATE = Decimal("100.00")

ONE = Decimal("1")


def _rate(value: Optional[Decimal]) -> Decimal:
    return to_money(value)


def _hub_rate(value: Optional[Decimal]) -> Decimal:
    return DEFAULT_HUB_SESSION_RATE if value is None else to_money(value)


def resolve(source: BillableSource) -> PriceQuote:
    """Resolve the base price of a billable source; pure, no side effects"""
    if isinstance(source, RecurringEnrollment):
        return _resolve_enrollment(source)
    if isinstance(source, EventOrderSource):
        return _resolve_event_order(source)
    if isinstance(source, HubSessionSource):
        return PriceQuote(quantity=ONE, unit_price=_hub_rate(source.daily_rate))
    raise TypeError(f"Unsupported billable source: {type(source).__name__}")


def _resolve_enrollment(enrollment: RecurringEnrollment) -> PriceQuote:
    code = enrollment.service.service_code
    frequency = enrollment.service.billing_frequency

    if code == ServiceCode.ACADEMIC_COACHING:
        return PriceQuote(
            quantity=_rate(enrollment.hours_per_week),
            unit_price=_rate(enrollment.hourly_rate),
        )

    # Pods are per-session but billed monthly; no hub default applies
    if code == ServiceCode.LEARNING_POD:
        return PriceQuote(quantity=ONE, unit_price=_rate(enrollment.daily_rate))

    if code == ServiceCode.EATON_HUB or frequency == BillingFrequency.PER_SESSION:
        return PriceQuote(quantity=ONE, unit_price=_hub_rate(enrollment.daily_rate))

    if code == ServiceCode.EATON_ONLINE or frequency == BillingFrequency.WEEKLY:
        return PriceQuote(quantity=ONE, unit_price=_rate(enrollment.weekly_tuition))

    return PriceQuote(quantity=ONE, unit_price=_rate(enrollment.monthly_rate))


def _resolve_event_order(order: EventOrderSource) -> PriceQuote:
    total = cents_to_dollars(order.total_cents)
    if order.quantity <= 0:
        return PriceQuote(quantity=ONE, unit_price=total)

    quantity = Decimal(order.quantity)
    unit_price = round2(total / quantity)
    # A cent price that cannot reproduce the charge is billed as one line
    if multiply_money(unit_price, quantity) != total:
        return PriceQuote(quantity=ONE, unit_price=total)
    return PriceQuote(quantity=quantity, unit_price=unit_price)
