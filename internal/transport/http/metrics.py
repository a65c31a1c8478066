"""
Request metrics middleware.

Counts requests and observes their latency per method, route template and
status code. Requests that raise are recorded with status 500 before the
exception propagates.
"""

import time
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from internal.infrastructure.metrics import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
)

UNMATCHED_ROUTE = "unmatched"


def route_template(request: Request) -> str:
    """
    Label for the endpoint that served a request.

    Uses the matched route path (/api/v1/products/{product_id}) so that
    product ids do not create new series.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """Prometheus HTTP metrics for every route except the excluded paths."""

    def __init__(
        self,
        app: ASGIApp,
        exclude_paths: Iterable[str] = ("/api/v1/products/metrics",),
    ) -> None:
        super().__init__(app)
        self._exclude_paths = frozenset(exclude_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exclude_paths:
            return await call_next(request)

        status_code = 500
        started = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = route_template(request)
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.perf_counter() - started)
