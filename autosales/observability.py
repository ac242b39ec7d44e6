"""Request metrics and access logging."""

from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

REQUEST_COUNT = Counter(
    "autosales_http_requests_total",
    "HTTP requests processed",
    ["method", "route", "status"],
)
REQUEST_LATENCY = Histogram(
    "autosales_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "route"],
)

_SKIP_PATHS = {"/metrics", "/health", "/healthz"}


def _route_label(request: Request) -> str:
    # Use the route template so ids do not explode label cardinality.
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or "unmatched"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed = time.perf_counter() - started
            route = _route_label(request)
            REQUEST_COUNT.labels(request.method, route, str(status_code)).inc()
            REQUEST_LATENCY.labels(request.method, route).observe(elapsed)
            logger.debug(
                "http_request method=%s route=%s status=%s duration_ms=%.1f",
                request.method,
                route,
                status_code,
                elapsed * 1000,
            )
