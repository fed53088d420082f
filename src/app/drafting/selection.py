"""Selection state

The set of selected item ids is explicit state owned by the caller and passed
into the grouper and batch creator. SelectionTracker keeps that set and
re-applies default selection only when the number of eligible items changes,
so a manual deselection survives re-pricing of an unchanged item set.
"""

from typing import AbstractSet, List, Optional, Sequence, Set

from .grouping import default_selection
from .models import PricedItem


class SelectionTracker:
    def __init__(self, selected: Optional[Set[str]] = None):
        self.selected: Set[str] = set(selected or ())
        self._eligible_count: Optional[int] = None

    def sync(
        self,
        items: Sequence[PricedItem],
        duplicate_customer_ids: AbstractSet[int] = frozenset(),
    ) -> Set[str]:
        if len(items) != self._eligible_count:
            self._eligible_count = len(items)
            self.selected = default_selection(items, duplicate_customer_ids)
        return set(self.selected)

    def toggle(self, item_id: str) -> None:
        if item_id in self.selected:
            self.selected.discard(item_id)
        else:
            self.selected.add(item_id)

    def toggle_customer(self, items: Sequence[PricedItem], customer_id: Optional[int]) -> None:
        """Select every item of the customer, or clear them if all are selected"""
        ids = [item.item_id for item in items if item.customer_id == customer_id]
        if all(item_id in self.selected for item_id in ids):
            self.selected.difference_update(ids)
        else:
            self.selected.update(ids)

    def toggle_all(
        self,
        items: Sequence[PricedItem],
        duplicate_customer_ids: AbstractSet[int] = frozenset(),
    ) -> None:
        selectable = default_selection(items, duplicate_customer_ids)
        if self.selected == selectable:
            self.selected = set()
        else:
            self.selected = selectable

    def selected_items(self, items: Sequence[PricedItem]) -> List[PricedItem]:
        return [item for item in items if item.item_id in self.selected]
