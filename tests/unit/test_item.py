"""
Unit tests for secret and secret version entries.
"""

from unittest.mock import patch

import pytest

from secret_cache.caching.item import VERSION_CACHE_SIZE, SecretItemPolicy, create_secret_item
from secret_cache.caching.version import SecretVersionPolicy, create_secret_version
from secret_cache.config import SecretCacheConfig
from secret_cache.models import DescribeSecretResult, GetSecretValueResult


def describe(mapping):
    return DescribeSecretResult(name="test-secret", version_ids_to_stages=mapping)


class TestSecretItem:
    """Test cases for secret entries."""

    def test_reads_through_once(self, store, config):
        item = create_secret_item("test-secret", store, config)

        for _ in range(10):
            assert item.get_value().secret_string == "secret"

        store.describe_secret.assert_called_once_with("test-secret")
        store.get_secret_value.assert_called_once_with("test-secret", "versionId")

    def test_resolves_first_matching_version(self, store, config):
        store.describe_secret.return_value = describe({
            "old": ["AWSPREVIOUS"],
            "current": ["AWSCURRENT", "custom"],
            "other": ["AWSCURRENT"],
        })
        item = create_secret_item("test-secret", store, config)
        item.get_value()

        store.get_secret_value.assert_called_once_with("test-secret", "current")

    def test_no_matching_stage(self, store, config):
        store.describe_secret.return_value = describe({"v1": None, "v2": ["AWSPREVIOUS"], "v3": []})
        item = create_secret_item("test-secret", store, config)

        assert item.get_value() is None
        store.get_secret_value.assert_not_called()

    def test_missing_stage_mapping(self, store, config):
        store.describe_secret.return_value = describe(None)
        item = create_secret_item("test-secret", store, config)

        assert item.get_value() is None
        store.get_secret_value.assert_not_called()

    def test_configured_version_stage(self, store):
        store.describe_secret.return_value = describe({"v1": ["AWSCURRENT"], "v2": ["AWSPENDING"]})
        item = create_secret_item("test-secret", store, SecretCacheConfig(version_stage="AWSPENDING"))
        item.get_value()

        store.get_secret_value.assert_called_once_with("test-secret", "v2")

    def test_ttl_expiry_same_version(self, store, clock, max_jitter):
        item = create_secret_item("test-secret", store, SecretCacheConfig(cache_item_ttl=500))

        for _ in range(10):
            item.get_value()
        clock.advance(600)
        for _ in range(10):
            item.get_value()

        assert store.describe_secret.call_count == 2
        assert store.get_secret_value.call_count == 1

    def test_ttl_expiry_new_version(self, store, clock, max_jitter):
        item = create_secret_item("test-secret", store, SecretCacheConfig(cache_item_ttl=500))
        item.get_value()

        store.describe_secret.return_value = describe({"v2": ["AWSCURRENT"], "versionId": ["AWSPREVIOUS"]})
        store.get_secret_value.return_value = GetSecretValueResult(secret_string="rotated")
        clock.advance(600)

        assert item.get_value().secret_string == "rotated"
        assert store.describe_secret.call_count == 2
        assert store.get_secret_value.call_count == 2
        store.get_secret_value.assert_called_with("test-secret", "v2")

    def test_no_refresh_before_ttl(self, store, clock, max_jitter):
        item = create_secret_item("test-secret", store, SecretCacheConfig(cache_item_ttl=500))
        item.get_value()
        clock.advance(499)
        item.get_value()

        store.describe_secret.assert_called_once()

    def test_schedules_refresh_within_ttl(self, store, clock):
        policy = SecretItemPolicy("test-secret", store, SecretCacheConfig(cache_item_ttl=1000))

        with patch("secret_cache.caching.item.random.randint", return_value=700) as randint:
            policy.execute_refresh()

        randint.assert_called_once_with(500, 1000)
        assert policy.next_refresh_time == clock.now + 700

    def test_switching_back_reuses_cached_version(self, store, config, no_force_refresh_sleep):
        item = create_secret_item("test-secret", store, config)
        item.get_value()

        store.describe_secret.return_value = describe({"v2": ["AWSCURRENT"]})
        item.refresh_now()
        item.get_value()

        store.describe_secret.return_value = describe({"versionId": ["AWSCURRENT"]})
        item.refresh_now()
        item.get_value()

        assert store.get_secret_value.call_count == 2

    def test_version_cache_is_bounded(self, store, config, no_force_refresh_sleep):
        item = create_secret_item("test-secret", store, config)

        for n in range(VERSION_CACHE_SIZE + 1):
            store.describe_secret.return_value = describe({f"v{n}": ["AWSCURRENT"]})
            item.refresh_now()
            item.get_value()
        assert store.get_secret_value.call_count == VERSION_CACHE_SIZE + 1

        # v0 was the least recently used version and has been evicted
        store.describe_secret.return_value = describe({"v0": ["AWSCURRENT"]})
        item.refresh_now()
        item.get_value()
        assert store.get_secret_value.call_count == VERSION_CACHE_SIZE + 2

    def test_describe_failure_raised(self, store, config):
        store.describe_secret.side_effect = RuntimeError("denied")
        item = create_secret_item("test-secret", store, config)

        with pytest.raises(RuntimeError, match="denied"):
            item.get_value()
        store.get_secret_value.assert_not_called()

    def test_version_failure_raised(self, store, config):
        store.get_secret_value.side_effect = RuntimeError("throttled")
        item = create_secret_item("test-secret", store, config)

        with pytest.raises(RuntimeError, match="throttled"):
            item.get_value()

    def test_pending_error_suppresses_ttl_refresh(self, store, clock, max_jitter):
        item = create_secret_item("test-secret", store, SecretCacheConfig(cache_item_ttl=100))
        item.get_value()

        store.describe_secret.side_effect = RuntimeError("denied")
        clock.advance(100)
        item.get_value()
        assert store.describe_secret.call_count == 2

        # TTL has passed again but the retry backoff (2s) has not
        clock.advance(150)
        item.get_value()
        assert store.describe_secret.call_count == 2


class TestSecretVersion:
    """Test cases for secret version entries."""

    def test_fetches_version(self, store, config):
        version = create_secret_version("test-secret", "versionId", store, config)

        for _ in range(5):
            assert version.get_value().secret_binary == b"secret"
        store.get_secret_value.assert_called_once_with("test-secret", "versionId")
        store.describe_secret.assert_not_called()

    def test_identity(self, store, config):
        first = create_secret_version("s", "v1", store, config)
        same = create_secret_version("s", "v1", store, config)
        other = create_secret_version("s", "v2", store, config)

        assert first.key == ("s", "v1")
        assert first == same
        assert first != other
        assert isinstance(first.policy, SecretVersionPolicy)

    def test_version_never_expires(self, store, config, clock):
        version = create_secret_version("test-secret", "versionId", store, config)
        version.get_value()
        clock.advance(10 * 3600000)
        version.get_value()

        store.get_secret_value.assert_called_once()
