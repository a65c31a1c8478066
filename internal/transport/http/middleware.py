"""
HTTP middleware for the product API.
"""

from .metrics import MetricsMiddleware, route_template

__all__ = [
    "MetricsMiddleware",
    "route_template",
]
