"""Prometheus metrics for the S3 COSI driver."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

# Driver request metrics
request_total = Counter(
    "s3_cosi_driver_request_total",
    "Total number of driver requests",
    ["operation", "result"],
)

request_duration_seconds = Histogram(
    "s3_cosi_driver_request_duration_seconds",
    "Duration of driver requests in seconds",
    ["operation"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

error_total = Counter(
    "s3_cosi_driver_error_total",
    "Total number of failed driver requests by error type",
    ["operation", "error_type"],
)

# Backend call metrics
backend_call_total = Counter(
    "s3_cosi_driver_backend_call_total",
    "Total number of backend calls",
    ["backend", "operation", "result"],
)

backend_call_duration_seconds = Histogram(
    "s3_cosi_driver_backend_call_duration_seconds",
    "Duration of backend calls in seconds",
    ["backend", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Lock contention
lock_wait_seconds = Histogram(
    "s3_cosi_driver_lock_wait_seconds",
    "Time spent waiting for a bucket lock",
    ["operation"],
    buckets=[0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 30.0],
)


@contextmanager
def track_backend_call(backend: str, operation: str) -> Iterator[None]:
    """Record the outcome and duration of a backend call."""
    start_time = time.time()
    try:
        yield
        backend_call_total.labels(backend=backend, operation=operation, result="success").inc()
    except Exception:
        backend_call_total.labels(backend=backend, operation=operation, result="error").inc()
        raise
    finally:
        duration = time.time() - start_time
        backend_call_duration_seconds.labels(backend=backend, operation=operation).observe(duration)
