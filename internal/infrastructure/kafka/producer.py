"""
Kafka Producer for event publishing.

Publishes catalog events such as stock-zero notifications to Kafka topics.
"""
import json
from typing import Any, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from internal.domain.errors import EventPublishError
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


def _serialize_value(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return json.dumps(value, ensure_ascii=False).encode("utf-8")


class KafkaProducer:
    """
    Kafka producer for publishing catalog events.

    String payloads such as a product name are sent as raw UTF-8 text;
    anything else is serialized as JSON.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str = "merchandise-catalog-service",
    ) -> None:
        """
        Initialize the Kafka producer.

        Args:
            bootstrap_servers: Comma-separated list of Kafka brokers.
            client_id: Client identifier for the producer.
        """
        self._bootstrap_servers = bootstrap_servers
        self._client_id = client_id
        self._producer: Optional[AIOKafkaProducer] = None

    @property
    def is_started(self) -> bool:
        return self._producer is not None

    async def start(self) -> None:
        """Start the Kafka producer."""
        producer = AIOKafkaProducer(
            bootstrap_servers=self._bootstrap_servers,
            client_id=self._client_id,
            value_serializer=_serialize_value,
            key_serializer=lambda k: k.encode("utf-8") if k else None,
            acks="all",
        )
        await producer.start()
        self._producer = producer
        logger.info("Kafka producer started", bootstrap_servers=self._bootstrap_servers)

    async def stop(self) -> None:
        """Stop the Kafka producer."""
        if self._producer:
            await self._producer.stop()
            self._producer = None
            logger.info("Kafka producer stopped")

    async def publish(self, topic: str, payload: Any, key: Optional[str] = None) -> None:
        """
        Publish a message to Kafka.

        Args:
            topic: The Kafka topic to publish to.
            payload: Message value, a string or a JSON-serializable object.
            key: Optional message key. Defaults to the payload when it is a string.

        Raises:
            RuntimeError: If the producer has not been started.
            EventPublishError: If the broker rejects or fails to ack the message.
        """
        if not self._producer:
            raise RuntimeError("Producer not started")

        if key is None and isinstance(payload, str):
            key = payload

        try:
            await self._producer.send_and_wait(topic=topic, key=key, value=payload)
        except KafkaError as e:
            raise EventPublishError(topic, str(e)) from e

        logger.debug("Message published to Kafka", topic=topic, key=key)
