"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_operations = Counter(
    'booking_operations_total',
    'Booking operations by outcome',
    ['operation', 'outcome']  # create/update_status/update_details/delete; success or error code
)

booking_create_latency = Histogram(
    'booking_create_latency_seconds',
    'Booking creation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

scheduling_conflicts = Counter(
    'booking_scheduling_conflicts_total',
    'Booking requests rejected because of an overlapping active booking'
)

# HTTP metrics
http_request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    ['method', 'status_class'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set/invalidate, hit/miss/error
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Render the default registry in Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_operation(operation: str, outcome: str = "success"):
    """Outcome is "success" or the error code of the domain error raised."""
    booking_operations.labels(operation=operation, outcome=outcome).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()


def record_http_request(method: str, status_code: int, duration_seconds: float):
    http_request_latency.labels(
        method=method,
        status_class=f"{status_code // 100}xx",
    ).observe(duration_seconds)
