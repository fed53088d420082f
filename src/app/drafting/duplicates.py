"""Duplicate detection

Recurring runs flag whole customers that already have an invoice for the
period. Event and hub runs have no period: each order or booking, once
invoiced, drops out of the eligible set instead.
"""

from enum import Enum
from typing import Iterable, List, Set, TypeVar

from .models import ExistingInvoice
from .period import BillingPeriod

S = TypeVar("S")


class PeriodMatchPolicy(str, Enum):
    EXACT = "exact"
    OVERLAP = "overlap"


def _matches(invoice: ExistingInvoice, period: BillingPeriod, policy: PeriodMatchPolicy) -> bool:
    if invoice.period_start is None or invoice.period_end is None:
        return False
    if policy == PeriodMatchPolicy.EXACT:
        return invoice.period_start == period.start and invoice.period_end == period.end
    return invoice.period_start <= period.end and invoice.period_end >= period.start


def mark_duplicates(
    customer_ids: Iterable[int],
    existing_invoices: Iterable[ExistingInvoice],
    period: BillingPeriod,
    policy: PeriodMatchPolicy = PeriodMatchPolicy.EXACT,
) -> Set[int]:
    """Customers among ``customer_ids`` already invoiced for ``period``"""
    candidates = set(customer_ids)
    return {
        invoice.customer_id
        for invoice in existing_invoices
        if invoice.customer_id in candidates and _matches(invoice, period, policy)
    }


def exclude_consumed(sources: Iterable[S], consumed_item_ids: Iterable[str]) -> List[S]:
    consumed = set(consumed_item_ids)
    return [source for source in sources if source.item_id not in consumed]
