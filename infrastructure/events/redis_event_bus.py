import json
import logging
from typing import Callable, Dict, Optional

import redis
from django.conf import settings

from .event_bus_interface import EventBus, build_envelope


logger = logging.getLogger(__name__)


class RedisEventBus(EventBus):
    """
    Redis pub/sub transport for invalidation events.

    Each topic maps to the channel ``<prefix>.<topic>``. Read views in other
    processes subscribe there and refetch; nothing is queued, so a consumer
    that is offline simply misses the signal.
    """

    def __init__(self, redis_url: Optional[str] = None, channel_prefix: Optional[str] = None):
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        self.redis_url = redis_url or getattr(settings, "REDIS_URL", "redis://localhost:6379/0")
        self.channel_prefix = channel_prefix or infrastructure.get("EVENT_CHANNEL_PREFIX", "events")
        self.redis_client = redis.from_url(self.redis_url, socket_connect_timeout=2, socket_timeout=2)
        self._pubsub = None
        self._handlers: Dict[str, Callable] = {}
        self._worker = None

    def channel_for(self, topic: str) -> str:
        return f"{self.channel_prefix}.{topic}"

    def publish(self, event_type: str, payload: dict):
        message = json.dumps(build_envelope(event_type, payload), default=str)
        try:
            receivers = self.redis_client.publish(self.channel_for(event_type), message)
            logger.debug(f"Published {event_type} to {receivers} subscriber(s)")
        except redis.RedisError as e:
            # Committed state is already durable; readers catch up on their next poll
            logger.error(f"Failed to publish event {event_type}: {e}")

    def subscribe(self, event_type: str, handler: Callable):
        channel = self.channel_for(event_type)
        self._handlers[channel] = handler
        if self._pubsub is None:
            self._pubsub = self.redis_client.pubsub(ignore_subscribe_messages=True)
        self._pubsub.subscribe(**{channel: self._dispatch})
        logger.info(f"Subscribed to {channel}")

    def start_listening(self, sleep_time: float = 0.1):
        """Deliver subscribed topics from a daemon thread managed by redis-py."""
        if self._pubsub is None or self._worker is not None:
            return
        self._worker = self._pubsub.run_in_thread(sleep_time=sleep_time, daemon=True)

    def stop_listening(self):
        if self._worker is not None:
            self._worker.stop()
            self._worker = None

    def _dispatch(self, message):
        channel = message["channel"]
        if isinstance(channel, bytes):
            channel = channel.decode()
        handler = self._handlers.get(channel)
        if handler is None:
            return
        try:
            handler(json.loads(message["data"]))
        except Exception as e:
            logger.error(f"Handler error on {channel}: {e}")
