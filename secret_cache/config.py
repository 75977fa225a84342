"""
Configuration management for the secret cache.
"""

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default cache size
DEFAULT_MAX_CACHE_SIZE = 1024

# Default TTL for an item stored in cache before access causes a refresh (ms)
DEFAULT_CACHE_ITEM_TTL = 60 * 60 * 1000

# Default version stage to use when retrieving secret values
DEFAULT_VERSION_STAGE = "AWSCURRENT"


class SecretCacheConfig(BaseSettings):
    """Cache settings, immutable once the cache is built."""

    model_config = SettingsConfigDict(
        env_prefix="SECRET_CACHE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    max_cache_size: int = Field(default=DEFAULT_MAX_CACHE_SIZE)
    cache_item_ttl: int = Field(default=DEFAULT_CACHE_ITEM_TTL, ge=0)
    version_stage: str = Field(default=DEFAULT_VERSION_STAGE, min_length=1)
    cache_hook: Optional[Any] = Field(default=None, exclude=True)
    log_level: str = Field(default="info")

    @field_validator("max_cache_size")
    @classmethod
    def _default_max_cache_size(cls, value: int) -> int:
        if value <= 0:
            return DEFAULT_MAX_CACHE_SIZE
        return value

    @field_validator("cache_hook")
    @classmethod
    def _check_cache_hook(cls, value: Any) -> Any:
        if value is None:
            return value
        for name in ("store", "retrieve"):
            if not callable(getattr(value, name, None)):
                raise ValueError(f"cache_hook must provide a callable '{name}'")
        return value


def get_config(**overrides: Any) -> SecretCacheConfig:
    """Get cache configuration, environment first, then overrides."""
    return SecretCacheConfig(**overrides)
