"""
Backoff timing for failed and forced refreshes.

All values are in milliseconds.
"""

import random

# Delay after the first failure
EXCEPTION_BACKOFF = 1000

# Growth factor of the backoff duration
EXCEPTION_BACKOFF_GROWTH_FACTOR = 2

# Longest wait before retrying a failed request
BACKOFF_PLATEAU = EXCEPTION_BACKOFF * 128

# Upper bound of the sleep performed by a forced refresh
FORCE_REFRESH_JITTER_SLEEP = 5000


class ExponentialBackoff:
    """Exponential backoff with jitter for a single cache entry."""

    def __init__(self,
                 base_delay: int = EXCEPTION_BACKOFF,
                 growth_factor: int = EXCEPTION_BACKOFF_GROWTH_FACTOR,
                 plateau: int = BACKOFF_PLATEAU,
                 force_refresh_sleep: int = FORCE_REFRESH_JITTER_SLEEP):
        self.base_delay = base_delay
        self.growth_factor = growth_factor
        self.plateau = plateau
        self.force_refresh_sleep_max = force_refresh_sleep

    def _uncapped_delay(self, exponent: int) -> int:
        # The base delay is always added so jitter cannot push the wait too low
        return self.base_delay + self.base_delay * (self.growth_factor ** exponent)

    def delay(self, exponent: int) -> int:
        """Retry delay for the given exponent, before jitter."""
        return min(self._uncapped_delay(exponent), self.plateau)

    def next_exponent(self, exponent: int) -> int:
        """Advance the exponent; it stops growing once the plateau is reached."""
        if self._uncapped_delay(exponent) < self.plateau:
            return exponent + 1
        return exponent

    @staticmethod
    def jittered(delay: int) -> int:
        """Draw a delay uniformly from [delay / 2, delay]."""
        return random.randint(delay // 2, delay)

    def retry_delay(self, exponent: int) -> int:
        """Jittered retry delay for the given exponent."""
        return self.jittered(self.delay(exponent))

    def force_refresh_sleep(self) -> int:
        """Sleep used by a forced refresh to discourage tight loops."""
        return self.jittered(self.force_refresh_sleep_max)

