"""
Prometheus metrics for the secret cache.
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional
import time

from prometheus_client import CollectorRegistry, Counter, Histogram


class CacheMetrics:
    """Metrics collector shared by a cache and all of its entries."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up cache metrics."""
        self._metrics["requests_total"] = Counter(
            "secret_cache_requests_total",
            "Total cache requests",
            ["operation"],
            registry=self.registry
        )

        self._metrics["refresh_total"] = Counter(
            "secret_cache_refresh_total",
            "Total refreshes against the secret store",
            ["entry_type", "status"],
            registry=self.registry
        )

        self._metrics["refresh_duration_seconds"] = Histogram(
            "secret_cache_refresh_duration_seconds",
            "Secret store refresh duration in seconds",
            ["entry_type"],
            registry=self.registry
        )

        self._metrics["evictions_total"] = Counter(
            "secret_cache_evictions_total",
            "Total LRU evictions",
            ["store"],
            registry=self.registry
        )

    def record_request(self, operation: str):
        self._metrics["requests_total"].labels(operation=operation).inc()

    def record_refresh(self, entry_type: str, success: bool):
        status = "success" if success else "failure"
        self._metrics["refresh_total"].labels(entry_type=entry_type, status=status).inc()

    def record_eviction(self, store: str):
        self._metrics["evictions_total"].labels(store=store).inc()

    @contextmanager
    def time_refresh(self, entry_type: str):
        """Context manager to time a refresh."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            self._metrics["refresh_duration_seconds"].labels(entry_type=entry_type).observe(duration)

    def get_sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read a sample value back from the registry."""
        return self.registry.get_sample_value(name, labels or {})
