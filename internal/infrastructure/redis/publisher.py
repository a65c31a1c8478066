"""
Redis pub/sub publisher for domain events.

Publishes serialized product events on a Redis channel; subscribers such
as the search indexer listen on the same channel name.
"""
from typing import Optional

import redis.asyncio as aioredis
from redis.asyncio import Redis

from internal.domain.errors import EventPublishError
from internal.domain.events import describe_event
from internal.infrastructure.metrics import DOMAIN_EVENTS_PUBLISHED
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class RedisEventPublisher:
    """
    Redis publisher for domain events.

    Owns one Redis client between connect() and disconnect(). Delivery is
    fire-and-forget: a message with no subscriber is dropped by Redis.
    """

    transport = "redis"

    def __init__(self, redis_url: str) -> None:
        """
        Initialize the Redis publisher.

        Args:
            redis_url: Redis connection URL.
        """
        self._redis_url = redis_url
        self._redis: Optional[Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = aioredis.from_url(
            self._redis_url,
            decode_responses=True,
        )
        await self._redis.ping()
        logger.info("Connected to Redis", url=self._redis_url)

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    async def start(self) -> None:
        """Alias for connect."""
        await self.connect()

    async def stop(self) -> None:
        """Alias for disconnect."""
        await self.disconnect()

    async def publish(self, topic: str, payload: str) -> None:
        """
        Publish a serialized event on a channel.

        Args:
            topic: Channel name.
            payload: JSON event string.

        Raises:
            EventPublishError: If the client is not connected.
        """
        event_type, product_id = describe_event(payload)

        if not self._redis:
            raise EventPublishError(event_type, "Redis not connected")

        receivers = await self._redis.publish(topic, payload)

        DOMAIN_EVENTS_PUBLISHED.labels(transport=self.transport, event_type=event_type).inc()
        logger.info(
            "Event published to Redis",
            channel=topic,
            event_type=event_type,
            product_id=product_id,
            receivers=receivers,
        )
