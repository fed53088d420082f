"""Event Publisher Implementations

Provides concrete implementations for emitting cache-invalidation events.
"""

import logging
from typing import Iterable, Optional
import httpx
from src.app.services.event_publisher import CacheEvent, EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Event publisher that logs events

    Useful for development and testing, or as a fallback.
    """

    async def publish(self, events: Iterable[CacheEvent]) -> bool:
        for event in events:
            logger.info(f"[CACHE EVENT] {event.value}")
        return True


class WebhookEventPublisher(EventPublisher):
    """
    Event publisher that POSTs events to a webhook

    Payload: {"type": "cache_invalidation", "events": ["invoices-changed", ...]}
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook event publisher

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def publish(self, events: Iterable[CacheEvent]) -> bool:
        names = [event.value for event in events]
        payload = {"type": "cache_invalidation", "events": names}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Published {names} to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to publish cache events {names}: {e}")
            return False


class CompositeEventPublisher(EventPublisher):
    """Event publisher that delegates to multiple publishers"""

    def __init__(self, publishers: list[EventPublisher]):
        self.publishers = publishers

    async def publish(self, events: Iterable[CacheEvent]) -> bool:
        """
        Publish to all configured publishers

        Returns:
            True if at least one publisher succeeded, False otherwise
        """
        events = list(events)
        success = False
        for publisher in self.publishers:
            try:
                if await publisher.publish(events):
                    success = True
            except Exception as e:
                logger.error(f"Event publisher {type(publisher).__name__} failed: {e}")
        return success


def create_event_publisher(
    webhook_url: Optional[str] = None, timeout: float = 10.0
) -> EventPublisher:
    """
    Factory function to create the appropriate event publisher

    Args:
        webhook_url: Optional webhook URL. If provided, events are logged and
                     POSTed to the webhook. Otherwise they are only logged.
        timeout: Webhook request timeout in seconds

    Returns:
        Configured EventPublisher
    """
    publishers: list[EventPublisher] = [LoggingEventPublisher()]

    if webhook_url:
        publishers.append(WebhookEventPublisher(webhook_url, timeout=timeout))

    if len(publishers) == 1:
        return publishers[0]

    return CompositeEventPublisher(publishers)
