"""
Metrics infrastructure package.
"""
from .prometheus import (
    DOMAIN_EVENTS_PUBLISHED,
    HTTP_REQUEST_DURATION,
    HTTP_REQUESTS_TOTAL,
    PRODUCT_MUTATIONS_TOTAL,
)

__all__ = [
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "PRODUCT_MUTATIONS_TOTAL",
    "DOMAIN_EVENTS_PUBLISHED",
]
