"""
Cache primitives.

- lru: bounded, thread-safe LRU store
- refreshable: refresh/backoff state machine shared by all entries
- item: secret entries (metadata, stage resolution)
- version: secret version entries (values)
"""

from .lru import LRUCache
from .refreshable import RefreshableObject, RefreshPolicy, RefreshState
from .item import SecretItemPolicy, create_secret_item
from .version import SecretVersionPolicy, create_secret_version

__all__ = [
    "LRUCache",
    "RefreshableObject",
    "RefreshPolicy",
    "RefreshState",
    "SecretItemPolicy",
    "SecretVersionPolicy",
    "create_secret_item",
    "create_secret_version",
]
