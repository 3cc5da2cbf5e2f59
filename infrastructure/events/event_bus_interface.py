from abc import ABC, abstractmethod
from typing import Callable

from django.utils import timezone


def build_envelope(topic: str, payload: dict) -> dict:
    """Wrap a payload the way every bus delivers it to subscribers."""
    return {"event_type": topic, "occurred_at": timezone.now().isoformat(), "payload": payload}


class EventBus(ABC):
    """Abstract invalidation bus. Topics are plain strings such as ``listings.pending``."""

    @abstractmethod
    def publish(self, event_type: str, payload: dict):
        """Publish event to bus. Implementations must not raise on delivery failure."""
        pass

    @abstractmethod
    def subscribe(self, event_type: str, handler: Callable):
        """Call ``handler(envelope)`` for every event published on the topic."""
        pass
