"""
Prometheus metrics collection.
"""

from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)

from unique_job.constants import (
    METRIC_LOCK_ADMISSIONS,
    METRIC_LOCK_STEAL_ATTEMPTS,
    METRIC_LOCK_EXPIRED,
    METRIC_LOCK_RELEASES,
    METRIC_LOCK_HELD,
    METRIC_REGISTRY_SKIPPED,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for job locks.

    Collects metrics for:
    - Admission outcomes (acquired, stolen, denied)
    - Stale lock theft attempts
    - Lazily expired leases
    - Lock releases and held time
    - Skipped worker registry entries
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.admissions = Counter(
            METRIC_LOCK_ADMISSIONS,
            "Total number of admission attempts by outcome",
            ["job_type", "outcome"],
            registry=self._registry,
        )

        self.steal_attempts = Counter(
            METRIC_LOCK_STEAL_ATTEMPTS,
            "Total number of attempts to steal a stale lock",
            ["job_type", "result"],
            registry=self._registry,
        )

        self.expired = Counter(
            METRIC_LOCK_EXPIRED,
            "Total number of locks deleted on read after lease expiry",
            ["job_type"],
            registry=self._registry,
        )

        self.releases = Counter(
            METRIC_LOCK_RELEASES,
            "Total number of lock releases by reason",
            ["job_type", "reason"],
            registry=self._registry,
        )

        self.held = Histogram(
            METRIC_LOCK_HELD,
            "Time a run lock was held in seconds",
            ["job_type", "status"],
            buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0, 900.0),
            registry=self._registry,
        )

        self.registry_skipped = Counter(
            METRIC_REGISTRY_SKIPPED,
            "Total number of worker registry entries skipped during stale checks",
            ["reason"],
            registry=self._registry,
        )

    def record_admission(self, job_type: str, outcome: str) -> None:
        """Record an admission outcome."""
        self.admissions.labels(job_type=job_type, outcome=outcome).inc()

    def record_steal_attempt(self, job_type: str, won: bool) -> None:
        """Record a stale lock theft attempt."""
        result = "won" if won else "lost"
        self.steal_attempts.labels(job_type=job_type, result=result).inc()

    def record_expired(self, job_type: str) -> None:
        """Record a lazily expired lock."""
        self.expired.labels(job_type=job_type).inc()

    def record_release(
        self,
        job_type: str,
        reason: str,
        held_seconds: float | None = None,
        status: str = "succeeded",
    ) -> None:
        """Record a lock release, observing held time when known."""
        self.releases.labels(job_type=job_type, reason=reason).inc()
        if held_seconds is not None:
            self.held.labels(job_type=job_type, status=status).observe(held_seconds)

    def record_registry_skipped(self, reason: str) -> None:
        """Record a skipped worker registry entry."""
        self.registry_skipped.labels(reason=reason).inc()

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
