"""
In-process, TTL based read-through cache for secrets.
"""

import threading
from typing import Optional

from prometheus_client import CollectorRegistry

from .caching.item import create_secret_item
from .caching.lru import LRUCache
from .caching.refreshable import RefreshableObject
from .config import SecretCacheConfig, get_config
from .logging import get_logger
from .metrics import CacheMetrics
from .models import GetSecretValueResult
from .store import Boto3SecretsStore, SecretsStore


class SecretCache:
    """
    Caches secrets fetched from a remote secret store.

    The cache logs through structlog but leaves logging setup to the host;
    call configure_logging() to opt in to JSON logs.

    Example:
        >>> with SecretCache(client=store) as cache:
        ...     password = cache.get_secret_string("prod/db/password")
    """

    def __init__(self,
                 config: Optional[SecretCacheConfig] = None,
                 client: Optional[SecretsStore] = None,
                 registry: Optional[CollectorRegistry] = None):
        """
        Initialize the cache.

        Args:
            config: Cache configuration, read from the environment when omitted
            client: Secret store to read through to, AWS Secrets Manager when omitted
            registry: Prometheus registry for cache metrics
        """
        self.config = config if config is not None else get_config()
        self.client = client if client is not None else Boto3SecretsStore.create()
        self.metrics = CacheMetrics(registry)

        self.logger = get_logger("secret_cache.cache")

        self._cache: LRUCache[str, RefreshableObject] = LRUCache(
            self.config.max_cache_size,
            on_evict=self._on_evicted
        )

    def __enter__(self) -> "SecretCache":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _on_evicted(self, secret_id: str, item: RefreshableObject) -> None:
        self.logger.debug("Evicted cached secret", secret_id=secret_id)
        self.metrics.record_eviction("items")

    def _get_cached_secret(self, secret_id: str) -> RefreshableObject:
        """Return the cache entry for the secret, creating it on first use."""
        secret = self._cache.get(secret_id)
        if secret is None:
            candidate = create_secret_item(secret_id, self.client, self.config, self.metrics)
            if self._cache.put_if_absent(secret_id, candidate):
                secret = candidate
            else:
                secret = self._cache.get(secret_id) or candidate
        return secret

    def get_secret_value(self, secret_id: str) -> Optional[GetSecretValueResult]:
        """
        Return the current value of a secret.

        Args:
            secret_id: Secret name or ARN

        Returns:
            A copy of the cached value, or None if no version carries the
            configured stage
        """
        self.metrics.record_request("get_secret_value")
        return self._get_cached_secret(secret_id).get_value()

    def get_secret_string(self, secret_id: str) -> Optional[str]:
        """Return the string payload of a secret, or None."""
        self.metrics.record_request("get_secret_string")
        value = self._get_cached_secret(secret_id).get_value()
        if value is None:
            return None
        return value.secret_string

    def get_secret_binary(self, secret_id: str) -> Optional[bytes]:
        """Return the binary payload of a secret, or None."""
        self.metrics.record_request("get_secret_binary")
        value = self._get_cached_secret(secret_id).get_value()
        if value is None:
            return None
        return value.secret_binary

    def refresh_now(self, secret_id: str, interrupt: Optional[threading.Event] = None) -> bool:
        """
        Force a refresh of a secret.

        Sleeps between 2.5 and 5 seconds first, longer while the secret is
        backing off after a failure.

        Args:
            secret_id: Secret name or ARN
            interrupt: Event that aborts the wait when set

        Returns:
            True if the refresh completed without error
        """
        self.metrics.record_request("refresh_now")
        return self._get_cached_secret(secret_id).refresh_now(interrupt)

    def close(self) -> None:
        """Drop all cached state."""
        self._cache.clear()
        self.logger.info("Secret cache closed")
