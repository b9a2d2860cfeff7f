from __future__ import annotations

from threading import Lock

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


class HttpMetrics:
    """HTTP request counter + latency histogram bound to one registry.

    prometheus_client serializes increments/observations internally, so callers
    never need to lock.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "The HTTP request latencies in seconds.",
            ["method", "path"],
            registry=registry,
        )
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests made.",
            ["method", "path", "status"],
            registry=registry,
        )

    def observe_request(self, method: str, path: str, status: int, duration: float) -> None:
        self.http_requests_total.labels(method=method, path=path, status=str(status)).inc()
        self.http_request_duration_seconds.labels(method=method, path=path).observe(duration)

    def render(self) -> bytes:
        return generate_latest(self.registry)


_METRICS: HttpMetrics | None = None
_METRICS_LOCK = Lock()


def create_process_metrics() -> HttpMetrics:
    """Build the process registry: HTTP series plus process/platform collectors."""
    registry = CollectorRegistry()
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    return HttpMetrics(registry)


def get_metrics() -> HttpMetrics:
    global _METRICS
    with _METRICS_LOCK:
        if _METRICS is None:
            _METRICS = create_process_metrics()
        return _METRICS
