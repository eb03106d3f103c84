"""Prometheus metrics for the gateway."""

from prometheus_client import Counter, Histogram

REQUESTS_TOTAL = Counter(
    "gateway_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "gateway_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)

REQUEST_DURATION = Histogram(
    "gateway_http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=["method"],
)

RESOLUTIONS_TOTAL = Counter(
    "gateway_resolutions_total",
    "Name to content hash resolutions",
    labelnames=["outcome"],
)

FETCHES_TOTAL = Counter(
    "gateway_fetches_total",
    "Gateway content fetches",
    labelnames=["outcome"],
)
