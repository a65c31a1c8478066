"""
Kafka Producer for domain events.

Publishes serialized product events to Kafka topics for downstream
consumers such as the search indexer.
"""
from typing import Optional

from aiokafka import AIOKafkaProducer

from internal.domain.errors import EventPublishError
from internal.domain.events import describe_event
from internal.infrastructure.metrics import DOMAIN_EVENTS_PUBLISHED
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class KafkaEventPublisher:
    """
    Kafka publisher for domain events.

    Owns one AIOKafkaProducer between start() and stop(). Messages are keyed
    by product id so that events of one product stay in one partition.
    """

    transport = "kafka"

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str = "product-service",
    ) -> None:
        """
        Initialize the Kafka publisher.

        Args:
            bootstrap_servers: Comma-separated list of Kafka brokers.
            client_id: Client identifier for the producer.
        """
        self._bootstrap_servers = bootstrap_servers
        self._client_id = client_id
        self._producer: Optional[AIOKafkaProducer] = None

    async def start(self) -> None:
        """Start the Kafka producer."""
        self._producer = AIOKafkaProducer(
            bootstrap_servers=self._bootstrap_servers,
            client_id=self._client_id,
            value_serializer=lambda v: v.encode("utf-8"),
            key_serializer=lambda k: k.encode("utf-8") if k else None,
            acks="all",
        )
        await self._producer.start()
        logger.info("Kafka producer started", bootstrap_servers=self._bootstrap_servers)

    async def stop(self) -> None:
        """Stop the Kafka producer."""
        if self._producer:
            await self._producer.stop()
            self._producer = None
            logger.info("Kafka producer stopped")

    async def publish(self, topic: str, payload: str) -> None:
        """
        Publish a serialized event.

        Args:
            topic: The Kafka topic to publish to.
            payload: JSON event string.

        Raises:
            EventPublishError: If the producer has not been started.
        """
        event_type, product_id = describe_event(payload)

        if not self._producer:
            raise EventPublishError(event_type, "Kafka producer not started")

        await self._producer.send_and_wait(
            topic=topic,
            key=product_id,
            value=payload,
        )

        DOMAIN_EVENTS_PUBLISHED.labels(transport=self.transport, event_type=event_type).inc()
        logger.info(
            "Event published to Kafka",
            topic=topic,
            event_type=event_type,
            product_id=product_id,
        )
