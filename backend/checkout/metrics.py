"""Prometheus metrics for monitoring and observability."""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from functools import lru_cache

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# ==============================================================================
# APPLICATION INFO
# ==============================================================================

app_info = Info("zero26_checkout", "Ticket checkout API information")
app_info.info({"version": "0.1.0", "service": "zero26-checkout"})

# ==============================================================================
# HTTP METRICS
# ==============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "HTTP requests currently in progress",
    ["method", "endpoint"],
)

# ==============================================================================
# CHECKOUT METRICS
# ==============================================================================

quotes_total = Counter(
    "checkout_quotes_total",
    "Quotes computed by coupon policy and outcome",
    ["policy", "result"],
)

orders_total = Counter(
    "checkout_orders_total",
    "Order creation attempts by outcome",
    ["result"],
)

coupon_redemptions_total = Counter(
    "checkout_coupon_redemptions_total",
    "Orders issued with a coupon applied",
    ["code"],
)

payment_verifications_total = Counter(
    "checkout_payment_verifications_total",
    "Payment callback verifications by outcome",
    ["result"],
)

gateway_request_duration_seconds = Histogram(
    "checkout_gateway_request_duration_seconds",
    "Latency of order-creation calls to the payment gateway",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


@lru_cache(maxsize=256)
def normalize_endpoint(path: str) -> str:
    """
    Normalize endpoint path to reduce cardinality.

    Examples:
        /v1/orders/123 -> /v1/orders/{id}
        /v1/orders/order_Ab12Cd34Ef56Gh78Ij90 -> /v1/orders/{id}
    """
    path = re.sub(r"/\d+(?=/|$)", "/{id}", path)
    path = re.sub(r"/[a-zA-Z0-9_-]{20,}", "/{id}", path)
    return path


# ==============================================================================
# PROMETHEUS MIDDLEWARE
# ==============================================================================


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path.endswith("/metrics"):
            return await call_next(request)

        method = request.method
        endpoint = normalize_endpoint(request.url.path)
        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()
        start_time = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                time.perf_counter() - start_time
            )
            http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
            http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()


def get_metrics() -> Response:
    """Generate Prometheus metrics response."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "PrometheusMiddleware",
    "coupon_redemptions_total",
    "gateway_request_duration_seconds",
    "get_metrics",
    "http_request_duration_seconds",
    "http_requests_total",
    "normalize_endpoint",
    "orders_total",
    "payment_verifications_total",
    "quotes_total",
]
