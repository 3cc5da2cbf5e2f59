"""
In-Memory Event Bus
===================

Synchronous, process-local implementation of EventBus for tests and local
development. Published envelopes are kept in ``published`` for verification.
"""

import logging
from typing import Callable, Dict, List

from .event_bus_interface import EventBus, build_envelope


logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    def __init__(self):
        self.published: List[dict] = []
        self._subscribers: Dict[str, List[Callable]] = {}

    def publish(self, event_type: str, payload: dict):
        message = build_envelope(event_type, payload)
        self.published.append(message)
        logger.debug(f"[MEMORY BUS] Published event: {event_type}")

        for handler in self._subscribers.get(event_type, []):
            try:
                handler(message)
            except Exception as e:
                logger.error(f"Handler error for {event_type}: {str(e)}")

    def subscribe(self, event_type: str, handler: Callable):
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.info(f"Registered handler for event: {event_type}")

    def events_of(self, event_type: str) -> List[dict]:
        return [m for m in self.published if m["event_type"] == event_type]

    def clear(self):
        self.published.clear()
