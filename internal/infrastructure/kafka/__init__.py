"""
Kafka infrastructure package.
"""

from .producer import KafkaEventPublisher

__all__ = [
    "KafkaEventPublisher",
]
