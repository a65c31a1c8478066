"""
Prometheus Metrics for Product Service.

Defines all metrics for monitoring Product Service performance and health.
"""

from prometheus_client import Counter, Histogram

# API metrics
HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Product mutation metrics
PRODUCT_MUTATIONS_TOTAL = Counter(
    'product_mutations_total',
    'Product mutation attempts by outcome',
    ['action', 'outcome']  # outcome: success, failure
)

# Event metrics
DOMAIN_EVENTS_PUBLISHED = Counter(
    'domain_events_published_total',
    'Domain events published',
    ['transport', 'event_type']
)
