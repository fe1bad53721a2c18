from typing import Dict, Optional, Tuple

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

REQUEST_DURATION_BUCKETS = (0.1, 0.5, 1, 2, 5)
LABEL_NAMES = ("method", "route", "status_code")


class RequestMetrics:
    """
    Prometheus metrics for one application instance.

    Each instance owns its registry, so several apps (tests) can live in one
    process without clashing on metric names.
    """

    def __init__(self):
        self.registry = CollectorRegistry()

        # Default process/platform/GC metrics, like the global registry has
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            LABEL_NAMES,
            buckets=REQUEST_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            LABEL_NAMES,
            registry=self.registry,
        )

    def observe(self, method: str, route: str, status_code: int, seconds: float) -> None:
        labels = (method, route, str(status_code))
        self.request_duration.labels(*labels).observe(seconds)
        self.requests_total.labels(*labels).inc()

    def render(self) -> Tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST

    def memory_usage(self) -> Dict[str, Optional[float]]:
        """Resident and virtual memory in bytes; None where the platform has no /proc."""
        return {
            "rss": self.registry.get_sample_value("process_resident_memory_bytes"),
            "virtual": self.registry.get_sample_value("process_virtual_memory_bytes"),
        }
