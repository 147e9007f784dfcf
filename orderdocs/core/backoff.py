"""Backoff Policy — pure description of how long to wait between bounded attempts.

Invariants:
    - max_attempts >= 1; attempt indices are 0-based
    - delay_ms(attempt) is capped by max_delay_ms
    - No IO, no sleeping: the shell decides how to wait

Design Decisions:
    - One policy type for counter retries and sync-visibility polling so both are
      tunable from settings and testable with a fake sleep
    - Jitter optional (default off): deterministic delays keep tests exact
"""

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class BackoffPolicy:
    """Bounded attempts with linear or exponential growth."""
    max_attempts: int
    base_delay_ms: int
    max_delay_ms: int = 60_000
    exponential: bool = False
    jitter: float = 0.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if not 0.0 <= self.jitter < 1.0:
            raise ValueError("jitter must be in [0, 1)")

    def delay_ms(self, attempt: int) -> int:
        """Delay after the given failed attempt (0-based)."""
        if self.exponential:
            delay = (2 ** attempt) * self.base_delay_ms
        else:
            delay = (attempt + 1) * self.base_delay_ms
        delay = min(self.max_delay_ms, delay)
        if self.jitter:
            delay = delay * random.uniform(1 - self.jitter, 1 + self.jitter)  # nosec B311
        return int(delay)
