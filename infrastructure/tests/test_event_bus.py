import json
from unittest.mock import MagicMock, patch

import pytest
import redis

from infrastructure.container import ServiceContainer, container
from infrastructure.events import InMemoryEventBus, RedisEventBus, create_event_bus, get_event_bus


@pytest.fixture(autouse=True)
def fresh_container():
    container.reset()
    yield
    container.reset()


class TestCreateEventBus:
    def test_memory_backend_from_settings(self):
        assert isinstance(create_event_bus(), InMemoryEventBus)

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_redis_backend(self, mock_from_url):
        bus = create_event_bus("redis")

        assert isinstance(bus, RedisEventBus)
        mock_from_url.assert_called_once()

    def test_invalid_backend(self):
        with pytest.raises(ValueError, match="Invalid event bus backend"):
            create_event_bus("kafka")

    def test_singleton_until_reset(self):
        first = get_event_bus()
        assert get_event_bus() is first

        container.reset()
        assert get_event_bus() is not first


class TestInMemoryEventBus:
    def test_publish_records_envelope_and_calls_handlers(self):
        bus = InMemoryEventBus()
        handler = MagicMock()
        bus.subscribe("listings.pending", handler)

        bus.publish("listings.pending", {"aggregate_id": 1})

        envelope = bus.events_of("listings.pending")[0]
        assert envelope["payload"] == {"aggregate_id": 1}
        assert "occurred_at" in envelope
        handler.assert_called_once_with(envelope)

    def test_failing_handler_does_not_stop_others(self):
        bus = InMemoryEventBus()
        second = MagicMock()
        bus.subscribe("favorites", MagicMock(side_effect=RuntimeError("boom")))
        bus.subscribe("favorites", second)

        bus.publish("favorites", {})

        second.assert_called_once()


class TestRedisEventBus:
    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_publish_uses_prefixed_channel(self, mock_from_url):
        client = mock_from_url.return_value
        bus = RedisEventBus("redis://example:6379/0")

        bus.publish("conversations", {"aggregate_id": 7})

        channel, body = client.publish.call_args.args
        assert channel == "events.conversations"
        assert json.loads(body)["payload"] == {"aggregate_id": 7}

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_publish_failure_is_swallowed(self, mock_from_url):
        mock_from_url.return_value.publish.side_effect = redis.ConnectionError("redis down")
        bus = RedisEventBus("redis://example:6379/0")

        bus.publish("conversations", {"aggregate_id": 7})

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_subscribed_handler_receives_envelope(self, mock_from_url):
        pubsub = mock_from_url.return_value.pubsub.return_value
        handler = MagicMock()
        bus = RedisEventBus("redis://example:6379/0", channel_prefix="bazaar")

        bus.subscribe("listings.catalog", handler)
        callback = pubsub.subscribe.call_args.kwargs["bazaar.listings.catalog"]
        callback({"channel": b"bazaar.listings.catalog", "data": '{"payload": {"aggregate_id": 1}}'})

        handler.assert_called_once_with({"payload": {"aggregate_id": 1}})


class TestServiceContainer:
    def test_is_singleton(self):
        assert ServiceContainer() is container

    def test_services_are_cached_and_share_notifier(self):
        listing_service = container.listing_service()

        assert container.listing_service() is listing_service
        assert container.favorite_service().notifier is listing_service.notifier
        assert container.messaging_service().notifier is listing_service.notifier

    def test_reset_rebuilds_services(self):
        before = container.messaging_service()

        container.reset()

        assert container.messaging_service() is not before
