"""
Cache hooks for transforming results before they are held in memory.
"""

import base64
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Tuple, Type

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import BaseModel

from .errors import CacheConfigurationError


class SecretCacheHook(ABC):
    """Pair of transforms applied to every cached result."""

    @abstractmethod
    def store(self, value: Any) -> Any:
        """Transform a fresh result into the form kept in the cache."""

    @abstractmethod
    def retrieve(self, stored: Any) -> Any:
        """Transform a cached form back into the original result."""


class FunctionCacheHook(SecretCacheHook):
    """Hook built from two plain callables."""

    def __init__(self, store: Callable[[Any], Any], retrieve: Callable[[Any], Any]):
        if not callable(store) or not callable(retrieve):
            raise CacheConfigurationError("store and retrieve must be callable")
        self._store = store
        self._retrieve = retrieve

    def store(self, value: Any) -> Any:
        return self._store(value)

    def retrieve(self, stored: Any) -> Any:
        return self._retrieve(stored)


class FernetCacheHook(SecretCacheHook):
    """
    Keeps cached results encrypted with Fernet.

    Results are serialized to JSON, encrypted, and only decrypted when a
    caller reads them.
    """

    def __init__(self, master_key: str, salt: Optional[bytes] = None, iterations: int = 100000):
        """
        Initialize the hook.

        Args:
            master_key: Secret the encryption key is derived from
            salt: KDF salt, random per hook when omitted
            iterations: PBKDF2 iteration count
        """
        if not master_key:
            raise CacheConfigurationError("Master key is required")

        self._fernet = self._create_fernet(master_key, salt or os.urandom(16), iterations)

    @staticmethod
    def _create_fernet(master_key: str, salt: bytes, iterations: int) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        key = base64.urlsafe_b64encode(kdf.derive(master_key.encode()))
        return Fernet(key)

    def store(self, value: Any) -> Optional[Tuple[Type[BaseModel], bytes]]:
        if value is None:
            return None
        if not isinstance(value, BaseModel):
            raise CacheConfigurationError(
                "FernetCacheHook only stores result models",
                details={"type": type(value).__name__}
            )
        return type(value), self._fernet.encrypt(value.model_dump_json().encode())

    def retrieve(self, stored: Optional[Tuple[Type[BaseModel], bytes]]) -> Any:
        if stored is None:
            return None
        model_class, token = stored
        return model_class.model_validate_json(self._fernet.decrypt(token))
