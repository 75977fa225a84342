"""
Unit tests for cache metrics.
"""

from prometheus_client import CollectorRegistry

from secret_cache.metrics import CacheMetrics


def test_samples_read_back_from_registry():
    metrics = CacheMetrics()

    metrics.record_request("get_secret_string")
    metrics.record_request("get_secret_string")
    metrics.record_eviction("versions")

    assert metrics.get_sample("secret_cache_requests_total", {"operation": "get_secret_string"}) == 2.0
    assert metrics.get_sample("secret_cache_evictions_total", {"store": "versions"}) == 1.0
    assert metrics.get_sample("secret_cache_evictions_total", {"store": "items"}) is None
    assert not hasattr(metrics, "get_metric")


def test_time_refresh_observes_on_failure():
    metrics = CacheMetrics()

    try:
        with metrics.time_refresh("item"):
            raise ValueError("boom")
    except ValueError:
        pass

    assert metrics.get_sample("secret_cache_refresh_duration_seconds_count", {"entry_type": "item"}) == 1.0


def test_private_registries_are_isolated():
    registry = CollectorRegistry()
    first = CacheMetrics(registry)
    second = CacheMetrics()

    first.record_refresh("version", success=False)

    assert first.registry is registry
    assert first.get_sample("secret_cache_refresh_total", {"entry_type": "version", "status": "failure"}) == 1.0
    assert second.get_sample("secret_cache_refresh_total", {"entry_type": "version", "status": "failure"}) is None
