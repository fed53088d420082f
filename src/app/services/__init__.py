from .unit_of_work import UnitOfWork
from .event_publisher import CacheEvent, EventPublisher, INVOICE_CREATION_EVENTS

__all__ = [
    "UnitOfWork",
    "CacheEvent",
    "EventPublisher",
    "INVOICE_CREATION_EVENTS",
]
