"""Metrics collection for the semembed service.

Provides a thin convenience wrapper around ``prometheus_client`` so the
service records request, error, token and latency metrics consistently.

Design notes
- Instruments are unlabeled; the service runs exactly one model
- Each collector owns its own ``CollectorRegistry`` (injectable for tests),
  never the process-global default registry
- Counters are the synchronization primitive; concurrent increments are safe
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST


class MetricsCollector:
    """Telemetry registry for the embedding service.

    Parameters
    - namespace: Prefix for every metric name
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)

    Exposes typed helpers for the events the request handler records.
    """

    def __init__(self, namespace: str = "semembed", registry: Optional[CollectorRegistry] = None):
        self.namespace = namespace
        self.registry = registry or CollectorRegistry()

        self.requests_total = Counter(
            f"{namespace}_requests_total",
            "Total number of embedding requests",
            registry=self.registry
        )

        self.request_duration = Histogram(
            f"{namespace}_request_duration_seconds",
            "Request duration in seconds",
            registry=self.registry
        )

        self.tokens_processed = Counter(
            f"{namespace}_tokens_processed_total",
            "Total number of tokens processed",
            registry=self.registry
        )

        self.errors_total = Counter(
            f"{namespace}_errors_total",
            "Total number of errors",
            registry=self.registry
        )

    def record_request(self) -> None:
        """Record that an embedding request was received."""
        self.requests_total.inc()

    def record_error(self) -> None:
        """Record a failed embedding request."""
        self.errors_total.inc()

    def record_tokens(self, count: int) -> None:
        """Add ``count`` approximate tokens to the processed total."""
        self.tokens_processed.inc(count)

    def time_request(self):
        """Context manager observing the enclosed block's duration.

        The observation happens on every exit path, including exceptions.
        """
        return self.request_duration.time()

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping.

        A pure read of current values; calling it has no side effects.
        """
        return generate_latest(self.registry).decode("utf-8")
