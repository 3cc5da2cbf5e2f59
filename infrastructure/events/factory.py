import logging
from typing import Optional

from django.conf import settings

from .event_bus_interface import EventBus


logger = logging.getLogger(__name__)

BACKENDS = ("redis", "memory")

_event_bus_instance: Optional[EventBus] = None


def create_event_bus(backend: Optional[str] = None) -> EventBus:
    """Build an event bus for ``INFRASTRUCTURE['EVENT_BUS_BACKEND']`` or the given backend."""
    backend = backend or getattr(settings, "INFRASTRUCTURE", {}).get("EVENT_BUS_BACKEND", "redis")
    if backend == "redis":
        from .redis_event_bus import RedisEventBus

        bus = RedisEventBus()
    elif backend == "memory":
        from .memory_event_bus import InMemoryEventBus

        bus = InMemoryEventBus()
    else:
        raise ValueError(f"Invalid event bus backend: {backend}. Valid options: {', '.join(BACKENDS)}")
    logger.info(f"Event bus backend: {backend}")
    return bus


def get_event_bus() -> EventBus:
    """Process-wide bus, built on first use."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = create_event_bus()
    return _event_bus_instance


def reset_event_bus():
    global _event_bus_instance
    _event_bus_instance = None
