"""
Redis infrastructure package.
"""
from .publisher import RedisEventPublisher

__all__ = ["RedisEventPublisher"]
