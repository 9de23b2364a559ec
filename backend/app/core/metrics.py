"""
Prometheus metrics.

HTTP traffic is measured by ``PrometheusMiddleware``; workspace, image and
token outcomes are counted by the ``record_*`` helpers called from the
service layer. ``GET /metrics`` serves the default registry.
"""
import time

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "HTTP requests by route template and status",
    ["method", "route", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency by route template",
    ["method", "route"],
)

HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "http_requests_in_flight",
    "HTTP requests currently being served",
)

WORKSPACE_OPERATIONS = Counter(
    "workspace_operations_total",
    "Workspace lifecycle and membership operations",
    ["operation", "status"],
)

STORAGE_OPERATIONS = Counter(
    "storage_operations_total",
    "Blob store operations",
    ["operation", "status"],
)

STORAGE_BYTES = Counter(
    "storage_bytes_total",
    "Bytes written through the blob store",
    ["operation"],
)

TOKEN_VALIDATIONS = Counter(
    "token_validations_total",
    "Bearer token checks",
    ["status"],
)

# Requests that matched no route share one label value
UNMATCHED_ROUTE = "unmatched"


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Count and time every request except metric scrapes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        HTTP_REQUESTS_IN_FLIGHT.inc()
        started = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # The route is only known once the router has matched
            route = _route_template(request)
            HTTP_REQUESTS.labels(request.method, route, str(status_code)).inc()
            HTTP_REQUEST_DURATION.labels(request.method, route).observe(time.perf_counter() - started)
            HTTP_REQUESTS_IN_FLIGHT.dec()


def _outcome(success: bool) -> str:
    return "success" if success else "error"


def record_workspace_operation(operation: str, success: bool = True) -> None:
    """Count a create/update/delete/reset/join outcome."""
    WORKSPACE_OPERATIONS.labels(operation, _outcome(success)).inc()


def record_storage_operation(operation: str, bytes_transferred: int = 0, success: bool = True) -> None:
    """Count a blob store outcome and the bytes it moved."""
    STORAGE_OPERATIONS.labels(operation, _outcome(success)).inc()
    if bytes_transferred:
        STORAGE_BYTES.labels(operation).inc(bytes_transferred)


def record_token_validation(success: bool = True) -> None:
    TOKEN_VALIDATIONS.labels("valid" if success else "rejected").inc()


def get_metrics() -> bytes:
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
