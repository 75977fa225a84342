"""
Cache entries for individual secret versions.
"""

from typing import Any, Dict, Optional, Tuple

from ..backoff import ExponentialBackoff
from ..config import SecretCacheConfig
from ..metrics import CacheMetrics
from ..models import GetSecretValueResult
from ..store import SecretsStore
from .refreshable import RefreshableObject, RefreshPolicy


class SecretVersionPolicy(RefreshPolicy):
    """Fetches the value of one (secret id, version id) pair."""

    entry_type = "version"

    def __init__(self, secret_id: str, version_id: str, client: SecretsStore):
        self.secret_id = secret_id
        self.version_id = version_id
        self.client = client

    @property
    def key(self) -> Tuple[str, str]:
        return self.secret_id, self.version_id

    def execute_refresh(self) -> GetSecretValueResult:
        return self.client.get_secret_value(self.secret_id, self.version_id)

    def project_value(self, result: Optional[GetSecretValueResult]) -> Optional[GetSecretValueResult]:
        return result

    def log_context(self) -> Dict[str, Any]:
        return {"secret_id": self.secret_id, "version_id": self.version_id}


def create_secret_version(secret_id: str,
                          version_id: str,
                          client: SecretsStore,
                          config: SecretCacheConfig,
                          metrics: Optional[CacheMetrics] = None,
                          backoff: Optional[ExponentialBackoff] = None) -> RefreshableObject:
    """Create a cache entry for a secret version."""
    return RefreshableObject(SecretVersionPolicy(secret_id, version_id, client), config, metrics, backoff)
