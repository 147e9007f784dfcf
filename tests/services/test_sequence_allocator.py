"""Sequence Allocator — verifies compare-and-set allocation under contention.

Tests:
    - Fresh scope starts at the initial value and increases by one
    - Concurrent allocators receive exactly {1..N}, no duplicates, no gaps
    - Initial offset applies on counter creation only
    - A lost compare-and-set is retried from a fresh read
    - Exhausted retries raise AllocationExhaustedError (retryable)
"""

import asyncio

import pytest

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.core.domain_types import COUNTERS_TABLE
from orderdocs.core.errors import AllocationExhaustedError, DatabaseError
from orderdocs.services.sequence_allocator import SequenceAllocator

ALLOCATION_POLICY = BackoffPolicy(max_attempts=30, base_delay_ms=5, max_delay_ms=50)


def _bump_counter(store, times: int | None):
    """before_update hook: a racing writer advances the counter first."""
    state = {"left": times}

    def hook(table, patch, filter):
        if table != COUNTERS_TABLE or state["left"] == 0:
            return
        if state["left"] is not None:
            state["left"] -= 1
        for row in store.tables[table]:
            if row["scope_key"] == filter["scope_key"] and row["year"] == filter["year"]:
                row["next_value"] += 1

    return hook


# ─── Sequential allocation ──────────────────────────────────────

async def test_fresh_scope_allocates_one_then_two(allocator):
    assert await allocator.allocate("tenant-7", 2025) == 1
    assert await allocator.allocate("tenant-7", 2025) == 2


async def test_scopes_and_years_are_independent(allocator):
    assert await allocator.allocate("1", 2025) == 1
    assert await allocator.allocate("2", 2025) == 1
    assert await allocator.allocate("1", 2026) == 1
    assert await allocator.allocate("1", 2025) == 2


async def test_counter_row_records_next_value(allocator, store):
    await allocator.allocate("global", 2025)
    await allocator.allocate("global", 2025)
    row = store.tables[COUNTERS_TABLE][0]
    assert row["next_value"] == 3


# ─── Initial offset ─────────────────────────────────────────────

async def test_initial_value_applies_on_create(store, sleep):
    allocator = SequenceAllocator(store, ALLOCATION_POLICY, initial_value=500, sleep=sleep)
    assert await allocator.allocate("global", 2025) == 500
    assert await allocator.allocate("global", 2025) == 501


async def test_initial_value_ignored_for_existing_counter(store, sleep):
    store.seed(COUNTERS_TABLE, scope_key="global", year=2025, next_value=10)
    allocator = SequenceAllocator(store, ALLOCATION_POLICY, initial_value=500, sleep=sleep)
    assert await allocator.allocate("global", 2025) == 10


# ─── Contention ─────────────────────────────────────────────────

async def test_concurrent_allocations_are_unique_and_gapless(allocator, store):
    n = 25
    values = await asyncio.gather(*(allocator.allocate("7", 2025) for _ in range(n)))
    assert sorted(values) == list(range(1, n + 1))
    assert len(store.tables[COUNTERS_TABLE]) == 1


async def test_concurrent_allocations_with_offset(store, sleep):
    allocator = SequenceAllocator(store, ALLOCATION_POLICY, initial_value=100, sleep=sleep)
    values = await asyncio.gather(*(allocator.allocate("global", 2025) for _ in range(10)))
    assert sorted(values) == list(range(100, 110))


async def test_lost_race_is_retried_from_fresh_read(allocator, store, sleep):
    store.seed(COUNTERS_TABLE, scope_key="global", year=2025, next_value=5)
    store.before_update = _bump_counter(store, times=1)

    assert await allocator.allocate("global", 2025) == 6
    assert len(sleep.delays) == 1
    assert store.tables[COUNTERS_TABLE][0]["next_value"] == 7


async def test_exhausted_retries_raise(store, sleep):
    policy = BackoffPolicy(max_attempts=4, base_delay_ms=10)
    allocator = SequenceAllocator(store, policy, sleep=sleep)
    store.seed(COUNTERS_TABLE, scope_key="global", year=2025, next_value=1)
    store.before_update = _bump_counter(store, times=None)

    with pytest.raises(AllocationExhaustedError) as info:
        await allocator.allocate("global", 2025)
    assert info.value.retryable is True
    assert info.value.context.attempts == 4
    assert len(sleep.delays) == 3


async def test_store_failure_is_not_retried(allocator, store, sleep):
    store.fail_tables.add(COUNTERS_TABLE)
    with pytest.raises(DatabaseError):
        await allocator.allocate("global", 2025)
    assert sleep.delays == []
