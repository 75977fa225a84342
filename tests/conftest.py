"""
Shared fixtures for secret cache tests.
"""

from unittest.mock import MagicMock, patch

import pytest

from secret_cache.backoff import ExponentialBackoff
from secret_cache.config import SecretCacheConfig
from secret_cache.models import DescribeSecretResult, GetSecretValueResult
from secret_cache.store import SecretsStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int):
        self.now += millis


@pytest.fixture
def store():
    """Secret store returning one AWSCURRENT version."""
    client = MagicMock(spec=SecretsStore)
    client.describe_secret.return_value = DescribeSecretResult(
        name="test-secret",
        version_ids_to_stages={"versionId": ["AWSCURRENT"]}
    )
    client.get_secret_value.return_value = GetSecretValueResult(
        name="test-secret",
        version_id="versionId",
        secret_string="secret",
        secret_binary=b"secret",
        version_stages=["AWSCURRENT"]
    )
    return client


@pytest.fixture
def config():
    return SecretCacheConfig(
        max_cache_size=1024,
        cache_item_ttl=3600000,
        version_stage="AWSCURRENT"
    )


@pytest.fixture
def clock():
    """Freeze the cache clock."""
    fake = FakeClock()
    with patch("secret_cache.caching.refreshable.current_millis", fake), \
            patch("secret_cache.caching.item.current_millis", fake):
        yield fake


@pytest.fixture
def max_jitter():
    """Make every random draw take its upper bound."""
    with patch("secret_cache.backoff.random.randint", side_effect=lambda low, high: high) as randint:
        yield randint


@pytest.fixture
def no_force_refresh_sleep():
    """Skip the sleep performed by forced refreshes."""
    with patch.object(ExponentialBackoff, "force_refresh_sleep", return_value=0) as sleep:
        yield sleep
