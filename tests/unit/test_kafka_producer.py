"""
Unit tests for the Kafka producer.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiokafka.errors import KafkaError

from internal.domain.errors import EventPublishError
from internal.infrastructure.kafka.producer import KafkaProducer


@pytest.fixture
def aiokafka_producer():
    """Mock AIOKafkaProducer instance."""
    producer = MagicMock()
    producer.start = AsyncMock()
    producer.stop = AsyncMock()
    producer.send_and_wait = AsyncMock()
    return producer


class TestKafkaProducer:

    @pytest.mark.asyncio
    async def test_publish_before_start_raises(self):
        producer = KafkaProducer(bootstrap_servers="kafka:9092")

        with pytest.raises(RuntimeError):
            await producer.publish("stock-zero-queue", "Smartphone X")

    @pytest.mark.asyncio
    async def test_start_configures_serializers(self, aiokafka_producer):
        with patch(
            "internal.infrastructure.kafka.producer.AIOKafkaProducer",
            return_value=aiokafka_producer,
        ) as factory:
            producer = KafkaProducer(bootstrap_servers="kafka:9092", client_id="catalog")
            await producer.start()

        kwargs = factory.call_args.kwargs
        assert kwargs["bootstrap_servers"] == "kafka:9092"
        assert kwargs["client_id"] == "catalog"
        # Product names go out as plain text, not JSON-quoted
        assert kwargs["value_serializer"]("Smartphone X") == b"Smartphone X"
        assert kwargs["value_serializer"]("Café") == "Café".encode("utf-8")
        assert kwargs["value_serializer"]({"name": "Smartphone X"}) == b'{"name": "Smartphone X"}'
        assert kwargs["key_serializer"]("Smartphone X") == b"Smartphone X"
        assert producer.is_started
        aiokafka_producer.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_string_payload_uses_it_as_key(self, aiokafka_producer):
        with patch(
            "internal.infrastructure.kafka.producer.AIOKafkaProducer",
            return_value=aiokafka_producer,
        ):
            producer = KafkaProducer(bootstrap_servers="kafka:9092")
            await producer.start()

        await producer.publish("stock-zero-queue", "Smartphone X")

        aiokafka_producer.send_and_wait.assert_awaited_once_with(
            topic="stock-zero-queue",
            key="Smartphone X",
            value="Smartphone X",
        )

    @pytest.mark.asyncio
    async def test_broker_error_raises_event_publish_error(self, aiokafka_producer):
        aiokafka_producer.send_and_wait.side_effect = KafkaError()
        with patch(
            "internal.infrastructure.kafka.producer.AIOKafkaProducer",
            return_value=aiokafka_producer,
        ):
            producer = KafkaProducer(bootstrap_servers="kafka:9092")
            await producer.start()

        with pytest.raises(EventPublishError) as exc_info:
            await producer.publish("stock-zero-queue", "Smartphone X")

        assert exc_info.value.event_type == "stock-zero-queue"

    @pytest.mark.asyncio
    async def test_stop(self, aiokafka_producer):
        with patch(
            "internal.infrastructure.kafka.producer.AIOKafkaProducer",
            return_value=aiokafka_producer,
        ):
            producer = KafkaProducer(bootstrap_servers="kafka:9092")
            await producer.start()

        await producer.stop()

        aiokafka_producer.stop.assert_awaited_once()
        assert not producer.is_started
