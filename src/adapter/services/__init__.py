from .unit_of_work import SqlAlchemyUnitOfWork
from .event_publisher import (
    LoggingEventPublisher,
    WebhookEventPublisher,
    CompositeEventPublisher,
    create_event_publisher,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingEventPublisher",
    "WebhookEventPublisher",
    "CompositeEventPublisher",
    "create_event_publisher",
]
