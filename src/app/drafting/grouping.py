"""Grouper

Partitions priced items by owning customer. Groups are ordered by name
(or total) with customers that already have an invoice for the period always
last, so actionable rows come first.
"""

from enum import Enum
from typing import AbstractSet, Dict, Iterable, List, Optional, Set

from libs.money import sum_money
from .models import CustomerDraftGroup, PricedItem

UNLINKED_CUSTOMER_NAME = "Unlinked"


class GroupSort(str, Enum):
    NAME = "name"
    TOTAL = "total"


def default_selection(
    items: Iterable[PricedItem], duplicate_customer_ids: AbstractSet[int] = frozenset()
) -> Set[str]:
    """Every linked item whose customer has no invoice for the period yet"""
    return {
        item.item_id
        for item in items
        if item.is_linked and item.customer_id not in duplicate_customer_ids
    }


def _build_group(
    customer_id: Optional[int],
    members: List[PricedItem],
    selected_ids: AbstractSet[str],
    duplicate_customer_ids: AbstractSet[int],
) -> CustomerDraftGroup:
    selected = [item for item in members if item.item_id in selected_ids]
    name = next((item.customer_name for item in members if item.customer_name), None)
    if name is None:
        name = UNLINKED_CUSTOMER_NAME if customer_id is None else f"Customer {customer_id}"

    return CustomerDraftGroup(
        customer_id=customer_id,
        customer_name=name,
        items=members,
        selected_item_ids=[item.item_id for item in selected],
        total_amount=sum_money(item.final_amount for item in selected),
        has_existing_invoice_for_period=customer_id is not None and customer_id in duplicate_customer_ids,
    )


def group(
    items: Iterable[PricedItem],
    selected_ids: AbstractSet[str],
    duplicate_customer_ids: AbstractSet[int] = frozenset(),
    sort_by: GroupSort = GroupSort.NAME,
    descending: bool = False,
) -> List[CustomerDraftGroup]:
    """
    Group items by customer

    Args:
        items: Priced items (selected and unselected)
        selected_ids: Item ids currently selected
        duplicate_customer_ids: Customers already invoiced for the period
        sort_by: Secondary ordering, by customer name or selected total
        descending: Reverse the secondary ordering

    Returns:
        One CustomerDraftGroup per customer (unlinked items share one group)
    """
    buckets: Dict[Optional[int], List[PricedItem]] = {}
    for item in items:
        buckets.setdefault(item.customer_id, []).append(item)

    groups = [
        _build_group(customer_id, members, selected_ids, duplicate_customer_ids)
        for customer_id, members in buckets.items()
    ]

    # Stable sorts, least significant key first
    groups.sort(key=lambda g: (g.customer_id is None, g.customer_id or 0))
    if sort_by == GroupSort.TOTAL:
        groups.sort(key=lambda g: g.total_amount, reverse=descending)
    else:
        groups.sort(key=lambda g: g.customer_name.casefold(), reverse=descending)
    groups.sort(key=lambda g: g.has_existing_invoice_for_period)
    return groups
