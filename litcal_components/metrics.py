"""
Prometheus Metrics
==================
Metric definitions and recording helpers for the HTTP transport stack.

All metrics live in `LITCAL_REGISTRY` so embedding applications can
expose them alongside, or separately from, their own registry.
"""

import re
from urllib.parse import urlsplit

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

LITCAL_REGISTRY = CollectorRegistry()

HTTP_REQUEST_LATENCY = Histogram(
    name="litcal_http_request_duration_seconds",
    documentation="Time spent on Liturgical Calendar API requests",
    labelnames=["method", "host", "outcome"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=LITCAL_REGISTRY,
)

HTTP_REQUEST_TOTAL = Counter(
    name="litcal_http_requests_total",
    documentation="Total number of Liturgical Calendar API requests",
    labelnames=["method", "host", "status"],
    registry=LITCAL_REGISTRY,
)

HTTP_CACHE_EVENTS = Counter(
    name="litcal_http_cache_events_total",
    documentation="HTTP response cache lookups by result",
    labelnames=["result"],
    registry=LITCAL_REGISTRY,
)

CIRCUIT_BREAKER_STATE = Gauge(
    name="litcal_circuit_breaker_state",
    documentation="Circuit breaker state (0=closed, 1=half-open, 2=open)",
    labelnames=["breaker"],
    registry=LITCAL_REGISTRY,
)

_STATE_VALUES = {"closed": 0, "half_open": 1, "open": 2}


def record_request(method: str, url: str, status: str, duration_seconds: float) -> None:
    """
    Record one end-to-end request.

    Args:
        method: HTTP method
        url: Request URL (only the host is used as a label)
        status: Status code as a string, or "error"
        duration_seconds: Wall time of the call
    """
    host = _host(url)
    outcome = "error" if status == "error" else _status_class(status)
    HTTP_REQUEST_TOTAL.labels(method=method, host=host, status=status).inc()
    HTTP_REQUEST_LATENCY.labels(method=method, host=host, outcome=outcome).observe(duration_seconds)


def record_cache_event(result: str) -> None:
    """Record a cache lookup result (hit or miss)."""
    HTTP_CACHE_EVENTS.labels(result=result).inc()


def record_circuit_state(breaker: str, state: str) -> None:
    """Record circuit breaker state (closed, half_open, open)."""
    CIRCUIT_BREAKER_STATE.labels(breaker=breaker).set(_STATE_VALUES.get(state, -1))


def get_metrics_text() -> bytes:
    """Prometheus exposition format for the library registry."""
    return generate_latest(LITCAL_REGISTRY)


def _host(url: str) -> str:
    return urlsplit(url).hostname or "local"


def _status_class(status: str) -> str:
    if re.fullmatch(r"\d{3}", status):
        return f"{status[0]}xx"
    return "unknown"
