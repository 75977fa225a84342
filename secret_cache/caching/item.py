"""
Cache entries for secrets.

A secret entry caches the secret's metadata and resolves the configured
version stage to a version id on every read. The value itself comes from
a nested version entry, so a metadata refresh that resolves to the same
version id does not fetch the value again.
"""

import random
from typing import Any, Dict, Optional

from ..backoff import ExponentialBackoff
from ..config import SecretCacheConfig
from ..logging import get_logger
from ..metrics import CacheMetrics
from ..models import DescribeSecretResult, GetSecretValueResult
from ..store import SecretsStore
from .lru import LRUCache
from .refreshable import RefreshableObject, RefreshPolicy, current_millis
from .version import create_secret_version

# Versions cached per secret
VERSION_CACHE_SIZE = 10


class SecretItemPolicy(RefreshPolicy):
    """Fetches secret metadata and delegates reads to version entries."""

    entry_type = "item"

    def __init__(self,
                 secret_id: str,
                 client: SecretsStore,
                 config: SecretCacheConfig,
                 metrics: Optional[CacheMetrics] = None,
                 backoff: Optional[ExponentialBackoff] = None):
        self.secret_id = secret_id
        self.client = client
        self.config = config
        self.metrics = metrics
        self.backoff = backoff
        self.logger = get_logger("secret_cache.caching.item").bind(secret_id=secret_id)

        self.versions: LRUCache[str, RefreshableObject] = LRUCache(
            VERSION_CACHE_SIZE,
            default_size=VERSION_CACHE_SIZE,
            on_evict=self._on_version_evicted
        )
        # Once the entry is read after this time it is refreshed synchronously
        self.next_refresh_time = 0

    @property
    def key(self) -> str:
        return self.secret_id

    def log_context(self) -> Dict[str, Any]:
        return {"secret_id": self.secret_id}

    def _on_version_evicted(self, version_id: str, version: RefreshableObject) -> None:
        self.logger.debug("Evicted cached version", version_id=version_id)
        if self.metrics is not None:
            self.metrics.record_eviction("versions")

    def is_refresh_due(self) -> bool:
        return current_millis() >= self.next_refresh_time

    def execute_refresh(self) -> DescribeSecretResult:
        result = self.client.describe_secret(self.secret_id)
        ttl = self.config.cache_item_ttl
        self.next_refresh_time = current_millis() + random.randint(ttl // 2, ttl)
        return result

    def get_version(self, describe_result: Optional[DescribeSecretResult]) -> Optional[RefreshableObject]:
        """Return the version entry for the configured stage, creating it on first use."""
        if describe_result is None:
            return None
        version_id = describe_result.version_for_stage(self.config.version_stage)
        if version_id is None:
            return None

        version = self.versions.get(version_id)
        if version is None:
            candidate = create_secret_version(
                self.secret_id, version_id, self.client, self.config, self.metrics, self.backoff
            )
            if self.versions.put_if_absent(version_id, candidate):
                version = candidate
            else:
                version = self.versions.get(version_id) or candidate
        return version

    def project_value(self, result: Optional[DescribeSecretResult]) -> Optional[GetSecretValueResult]:
        version = self.get_version(result)
        if version is None:
            return None
        return version.get_value()


def create_secret_item(secret_id: str,
                       client: SecretsStore,
                       config: SecretCacheConfig,
                       metrics: Optional[CacheMetrics] = None,
                       backoff: Optional[ExponentialBackoff] = None) -> RefreshableObject:
    """Create a cache entry for a secret."""
    return RefreshableObject(SecretItemPolicy(secret_id, client, config, metrics, backoff), config, metrics, backoff)
