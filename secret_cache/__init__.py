"""
Read-through cache for secrets held in a remote secret store.

Modules:

- cache: SecretCache, the entry point
- config: cache settings via pydantic-settings
- store: remote secret store interface and the AWS Secrets Manager adapter
- hooks: transforms applied to cached results (e.g. encryption)
- caching: LRU store and refreshable cache entries
- backoff: retry timing after failed refreshes
- logging: structured logging
- metrics: Prometheus metrics
- errors: exception types
"""

__version__ = "1.0.0"

from .cache import SecretCache
from .config import SecretCacheConfig, get_config
from .errors import (
    CacheConfigurationError,
    RefreshInterruptedError,
    SecretCacheException,
    SecretStoreError,
)
from .hooks import FernetCacheHook, FunctionCacheHook, SecretCacheHook
from .logging import configure_logging
from .models import DescribeSecretResult, GetSecretValueResult
from .store import Boto3SecretsStore, SecretsStore

__all__ = [
    "Boto3SecretsStore",
    "CacheConfigurationError",
    "DescribeSecretResult",
    "FernetCacheHook",
    "FunctionCacheHook",
    "GetSecretValueResult",
    "RefreshInterruptedError",
    "SecretCache",
    "SecretCacheConfig",
    "SecretCacheException",
    "SecretCacheHook",
    "SecretStoreError",
    "SecretsStore",
    "configure_logging",
    "get_config",
]
