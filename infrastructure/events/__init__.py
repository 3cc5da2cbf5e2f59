from .event_bus_interface import EventBus, build_envelope
from .factory import create_event_bus, get_event_bus, reset_event_bus
from .memory_event_bus import InMemoryEventBus
from .redis_event_bus import RedisEventBus


__all__ = [
    "EventBus",
    "InMemoryEventBus",
    "RedisEventBus",
    "build_envelope",
    "create_event_bus",
    "get_event_bus",
    "reset_event_bus",
]
