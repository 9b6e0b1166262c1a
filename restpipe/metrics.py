"""
Prometheus Metrics for restpipe

Provides counters and histograms for request monitoring.
Host application should expose the prometheus_client registry.
"""

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger("restpipe.metrics")

# One sample per attempt; "code" is "error" when the transport failed
REQUEST_COUNT = Counter(
    "restpipe_requests_total",
    "Total number of HTTP attempts made by restpipe pipelines",
    ["method", "code"],
)

REQUEST_LATENCY = Histogram(
    "restpipe_request_latency_seconds",
    "HTTP attempt latency in seconds",
    ["method"],
)

RETRY_COUNT = Counter(
    "restpipe_retries_total",
    "Total number of retried HTTP attempts",
    ["method"],
)


def record_attempt(method: str, code, latency: float) -> None:
    """
    Record metrics for one HTTP attempt.

    Args:
        method: HTTP method
        code: HTTP status code, or "error" for transport failures
        latency: Attempt duration in seconds
    """
    try:
        REQUEST_COUNT.labels(method=method, code=str(code)).inc()
        REQUEST_LATENCY.labels(method=method).observe(latency)
    except Exception as e:
        # Metrics failures should not break requests
        logger.debug("Failed to record metrics: %s", e)


def record_retry(method: str) -> None:
    try:
        RETRY_COUNT.labels(method=method).inc()
    except Exception as e:
        logger.debug("Failed to record metrics: %s", e)
