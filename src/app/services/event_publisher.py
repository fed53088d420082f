"""Event Publisher Interface

Defines the contract for emitting cache-invalidation events to the
presentation layer after invoices are created.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable


class CacheEvent(str, Enum):
    """Cache-invalidation signals"""
    INVOICES_CHANGED = "invoices-changed"
    DASHBOARD_STATS_CHANGED = "dashboard-stats-changed"
    ROSTER_STATS_CHANGED = "roster-stats-changed"


INVOICE_CREATION_EVENTS = (
    CacheEvent.INVOICES_CHANGED,
    CacheEvent.DASHBOARD_STATS_CHANGED,
    CacheEvent.ROSTER_STATS_CHANGED,
)


class EventPublisher(ABC):
    """
    Abstract publisher for cache-invalidation events

    Implementations can deliver events via:
    - Logging
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def publish(self, events: Iterable[CacheEvent]) -> bool:
        """
        Publish a set of events

        Args:
            events: Events to emit, in order

        Returns:
            True if delivered, False otherwise
        """
        pass
