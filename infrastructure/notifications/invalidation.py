"""
Query Invalidation Notifier
===========================

Tells dependent read views (pending queues, public catalog, conversation
lists) that the state behind them changed. Delivery is fire-and-forget:
notifications are scheduled for after the surrounding transaction commits
and a failed publish is logged, never raised to the caller.
"""

import logging
from typing import Iterable, Optional

from django.db import transaction

from infrastructure.events import EventBus, get_event_bus


logger = logging.getLogger(__name__)

# Topics
LISTINGS_PENDING = "listings.pending"
LISTINGS_CATALOG = "listings.catalog"
LISTINGS_OWNER = "listings.owner"
MESSAGES_PENDING = "messages.pending"
CONVERSATIONS = "conversations"
FAVORITES = "favorites"


class InvalidationNotifier:
    def __init__(self, event_bus: Optional[EventBus] = None):
        self._event_bus = event_bus

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = get_event_bus()
        return self._event_bus

    def notify(self, topic: str, payload: dict):
        """Publish immediately. Never raises."""
        try:
            self.event_bus.publish(topic, payload)
        except Exception as e:
            logger.error(f"Invalidation notify failed for topic {topic}: {e}")

    def notify_on_commit(self, topics: Iterable[str], payload: dict):
        """Schedule one notification per topic once the current transaction commits."""
        topics = list(topics)
        payload = dict(payload)

        def _send():
            for topic in topics:
                self.notify(topic, payload)

        transaction.on_commit(_send)
