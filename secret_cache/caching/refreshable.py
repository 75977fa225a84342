"""
Refresh and backoff state machine shared by every cache entry.

An entry holds the last good result from the secret store, the last
refresh failure (if any) and the backoff timing derived from it. What a
refresh actually fetches, and how the fetched result is turned into a
secret value, is supplied by a RefreshPolicy.
"""

import threading
import time
from abc import ABC, abstractmethod
from contextlib import nullcontext
from enum import Enum
from typing import Any, Dict, Hashable, Optional

from ..backoff import ExponentialBackoff
from ..config import SecretCacheConfig
from ..errors import RefreshInterruptedError
from ..logging import get_logger
from ..metrics import CacheMetrics
from ..models import GetSecretValueResult


def current_millis() -> int:
    """Wall clock time in milliseconds."""
    return int(time.time() * 1000)


class RefreshState(Enum):
    """Entry states."""
    FRESH = "fresh"        # Last result valid
    STALE = "stale"        # Refresh needed
    BACKOFF = "backoff"    # Last refresh failed, waiting to retry


class RefreshPolicy(ABC):
    """What an entry fetches and how it derives a secret value from it."""

    entry_type = "entry"

    @property
    @abstractmethod
    def key(self) -> Hashable:
        """Identity of the entry."""

    @abstractmethod
    def execute_refresh(self) -> Any:
        """Call the secret store and return the fresh result."""

    @abstractmethod
    def project_value(self, result: Any) -> Optional[GetSecretValueResult]:
        """Derive the secret value from a cached result."""

    def is_refresh_due(self) -> bool:
        """Extra refresh condition checked while no failure is pending."""
        return False

    def log_context(self) -> Dict[str, Any]:
        return {}


class RefreshableObject:
    """A cached secret store result that refreshes itself on read."""

    def __init__(self,
                 policy: RefreshPolicy,
                 config: SecretCacheConfig,
                 metrics: Optional[CacheMetrics] = None,
                 backoff: Optional[ExponentialBackoff] = None):
        self.policy = policy
        self.config = config
        self.metrics = metrics
        self.backoff = backoff or ExponentialBackoff()
        self.logger = get_logger(f"secret_cache.caching.{policy.entry_type}").bind(**policy.log_context())

        self._lock = threading.Lock()
        self._refresh_needed = True
        self._data: Any = None
        self._error: Optional[Exception] = None
        self._backoff_exponent = 0
        self._next_retry_time = 0

    @property
    def key(self) -> Hashable:
        return self.policy.key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RefreshableObject):
            return NotImplemented
        return type(self.policy) is type(other.policy) and self.key == other.key

    def __hash__(self) -> int:
        return hash((type(self.policy), self.key))

    def __repr__(self) -> str:
        return f"<{type(self.policy).__name__} {self.key!r} {self.state.value}>"

    def _get_result(self) -> Any:
        hook = self.config.cache_hook
        if hook is not None:
            return hook.retrieve(self._data)
        return self._data

    def _set_result(self, result: Any) -> None:
        hook = self.config.cache_hook
        self._data = hook.store(result) if hook is not None else result

    def is_refresh_needed(self) -> bool:
        """Determine if the entry should be refreshed."""
        if self._refresh_needed:
            return True
        if self._error is not None:
            # Don't keep hitting the store after a failure; wait out the backoff
            return current_millis() >= self._next_retry_time
        return self.policy.is_refresh_due()

    def _current_state(self) -> RefreshState:
        """Caller holds the lock."""
        if self._error is not None and current_millis() < self._next_retry_time:
            return RefreshState.BACKOFF
        if self.is_refresh_needed():
            return RefreshState.STALE
        return RefreshState.FRESH

    @property
    def state(self) -> RefreshState:
        with self._lock:
            return self._current_state()

    def _refresh(self) -> None:
        """Refresh the cached result only when needed. Caller holds the lock."""
        if not self.is_refresh_needed():
            return
        self._refresh_needed = False

        timer = self.metrics.time_refresh(self.policy.entry_type) if self.metrics else nullcontext()
        try:
            with timer:
                self._set_result(self.policy.execute_refresh())
        except Exception as e:
            self._error = e
            delay = self.backoff.retry_delay(self._backoff_exponent)
            self._backoff_exponent = self.backoff.next_exponent(self._backoff_exponent)
            self._next_retry_time = current_millis() + delay
            self.logger.warning(
                "Refresh failed, backing off",
                error=str(e),
                error_type=type(e).__name__,
                retry_in_ms=delay,
                backoff_exponent=self._backoff_exponent
            )
            self._record_refresh(False)
            return

        self._error = None
        self._backoff_exponent = 0
        self.logger.debug("Refreshed cache entry")
        self._record_refresh(True)

    def _record_refresh(self, success: bool) -> None:
        if self.metrics is not None:
            self.metrics.record_refresh(self.policy.entry_type, success)

    def get_value(self) -> Optional[GetSecretValueResult]:
        """
        Return the secret value, refreshing first if needed.

        Raises the pending refresh failure while no result has ever been
        fetched. Once a result exists, failures keep the last good value.

        Returns:
            A copy of the cached secret value, or None
        """
        with self._lock:
            self._refresh()
            if self._data is None and self._error is not None:
                raise self._error

            value = self.policy.project_value(self._get_result())
            if value is None:
                return None
            return value.clone()

    def refresh_now(self, interrupt: Optional[threading.Event] = None) -> bool:
        """
        Force a refresh of the entry.

        Always sleeps for a random interval first so callers cannot spin on
        this method; while a failure is pending the sleep lasts at least
        until the backoff expires.

        Args:
            interrupt: Event that aborts the wait when set

        Returns:
            True if the refresh completed without error

        Raises:
            RefreshInterruptedError: The wait was interrupted
        """
        with self._lock:
            self._refresh_needed = True
            sleep = self.backoff.force_refresh_sleep()
            if self._error is not None:
                sleep = max(self._next_retry_time - current_millis(), sleep)

        self.logger.info("Forcing refresh", sleep_ms=sleep)
        waiter = interrupt if interrupt is not None else threading.Event()
        if waiter.wait(sleep / 1000.0):
            raise RefreshInterruptedError(
                "Interrupted while waiting to refresh",
                details={"key": str(self.key)}
            )

        with self._lock:
            self._refresh()
            return self._error is None

    def get_state(self) -> Dict[str, Any]:
        """Get a diagnostic snapshot of the entry."""
        with self._lock:
            return {
                "key": self.key,
                "state": self._current_state().value,
                "has_result": self._data is not None,
                "error": str(self._error) if self._error is not None else None,
                "backoff_exponent": self._backoff_exponent,
                "next_retry_time": self._next_retry_time,
            }
