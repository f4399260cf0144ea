"""Prometheus metrics for proxy traffic, signature rejections and Admin API health"""

from prometheus_client import Counter, Histogram

# Proxy metrics
proxy_request_counter = Counter(
    "bazicash_proxy_requests_total",
    "App Proxy requests handled",
    ["endpoint", "outcome"],  # outcome: success | bad_request | not_found | upstream_error | not_supported
)

signature_failures_counter = Counter(
    "bazicash_signature_failures_total",
    "App Proxy requests rejected by signature verification",
)

# Admin API metrics
admin_api_latency_histogram = Histogram(
    "admin_api_latency_seconds",
    "Shopify Admin GraphQL response time",
    ["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

admin_api_failures_counter = Counter(
    "admin_api_failures_total",
    "Failed Shopify Admin GraphQL calls",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_proxy_request(endpoint: str, outcome: str) -> None:
    """Count a proxy call by its terminal outcome"""
    proxy_request_counter.labels(endpoint=endpoint, outcome=outcome).inc()
