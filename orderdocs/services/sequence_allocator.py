"""Sequence Allocator — unique, increasing integers per (scope, year) without an atomic increment.

Invariants:
    - No in-process lock: correctness rests on the store's conditional update and the
      unique constraint on (scope_key, year), so many instances can allocate concurrently
    - A value is returned only by the caller whose insert or compare-and-set succeeded,
      so no two callers ever receive the same value for one scope+year
    - initial_value applies only when the counter row is created, never on advance
    - Exhausted retries raise AllocationExhaustedError; identifier creation is never skipped

Design Decisions:
    - Lost races surface as CounterConflictError and are replayed by retry_async from
      a fresh read (never resumed mid-way)
    - A duplicate-create on the first insert falls straight through to the
      compare-and-set path with the winner's row instead of burning an attempt
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.core.domain_types import COUNTERS_TABLE
from orderdocs.core.errors import (
    AllocationExhaustedError,
    CounterConflictError,
    UniqueViolationError,
)
from orderdocs.core.repository_protocols import RecordStore, Row
from orderdocs.infrastructure.retry import Sleep, retry_async

logger = logging.getLogger(__name__)


def _is_counter_race(e: BaseException) -> bool:
    return isinstance(e, CounterConflictError)


class SequenceAllocator:
    """Issues the next value of a persisted counter."""

    def __init__(
        self,
        store: RecordStore,
        policy: BackoffPolicy,
        initial_value: int = 1,
        sleep: Sleep = asyncio.sleep,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.policy = policy
        self.initial_value = initial_value
        self.sleep = sleep
        self.now = now

    async def allocate(self, scope_key: str, year: int) -> int:
        """Next value for scope_key/year."""
        key = {"scope_key": scope_key, "year": year}

        async def attempt(n: int) -> int:
            return await self._try_once(key, n)

        try:
            return await retry_async(
                attempt,
                policy=self.policy,
                is_retryable=_is_counter_race,
                sleep=self.sleep,
                label=f"counter {scope_key}/{year}",
            )
        except CounterConflictError:
            raise AllocationExhaustedError(
                f"Could not allocate a sequence for {scope_key}/{year} "
                f"after {self.policy.max_attempts} attempts",
                attempts=self.policy.max_attempts,
            )

    async def _try_once(self, key: Row, attempt: int) -> int:
        row = await self.store.get(COUNTERS_TABLE, key)
        if row is None:
            try:
                await self.store.insert(COUNTERS_TABLE, {
                    **key,
                    "next_value": self.initial_value + 1,
                    "updated_at": self.now(),
                })
                logger.info(
                    "Created sequence counter",
                    extra={"scope_key": key["scope_key"], "year": key["year"]},
                )
                return self.initial_value
            except UniqueViolationError:
                row = await self.store.get(COUNTERS_TABLE, key)
                if row is None:
                    raise CounterConflictError(key["scope_key"], key["year"])

        current = row["next_value"]
        changed = await self.store.update(
            COUNTERS_TABLE,
            {"next_value": current + 1, "updated_at": self.now()},
            {**key, "next_value": current},
        )
        if not changed:
            logger.debug(
                "Counter advanced by a concurrent writer",
                extra={"scope_key": key["scope_key"], "attempt": attempt + 1},
            )
            raise CounterConflictError(key["scope_key"], key["year"])
        return current
