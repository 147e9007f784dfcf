"""Identifier Service — verifies collision skipping against durable work orders.

Tests:
    - Existing work order with the counter's next identifier is skipped
    - Tenant prefix applied; other tenants' identifiers do not collide
    - Exhaustion comes back as an error result, not an exception
"""

from datetime import datetime, timezone

from orderdocs.core.backoff import BackoffPolicy
from orderdocs.core.domain_types import COUNTERS_TABLE, TENANTS_TABLE, WORK_ORDERS_TABLE
from orderdocs.core.errors import AllocationExhaustedError
from orderdocs.services.identifier_service import IdentifierService
from orderdocs.services.sequence_allocator import SequenceAllocator


async def test_first_identifier_of_the_year(identifier_service):
    allocation = await identifier_service.allocate_identifier(None, 2025)
    assert allocation.ok
    assert allocation.identifier == "02-2025-0001"
    assert allocation.attempts == 1


async def test_existing_record_is_skipped(identifier_service, store):
    store.seed(WORK_ORDERS_TABLE, tenant_id=None, identifier="02-2025-0001", name="legacy")

    allocation = await identifier_service.allocate_identifier(None, 2025)

    assert allocation.identifier == "02-2025-0002"
    assert allocation.sequence == 2
    assert allocation.attempts == 2
    assert store.tables[COUNTERS_TABLE][0]["next_value"] == 3


async def test_tenant_prefix_is_used(identifier_service, store):
    store.seed(TENANTS_TABLE, id=3, name="Lab TX", identifier_prefix="TX")
    allocation = await identifier_service.allocate_identifier(3, 2025)
    assert allocation.identifier == "TX-2025-0001"


async def test_other_tenant_identifier_does_not_collide(identifier_service, store):
    store.seed(TENANTS_TABLE, id=3, name="A", identifier_prefix=None)
    store.seed(WORK_ORDERS_TABLE, tenant_id=4, identifier="02-2025-0001", name="other")

    allocation = await identifier_service.allocate_identifier(3, 2025)
    assert allocation.identifier == "02-2025-0001"


async def test_tenants_have_separate_counters(identifier_service, store):
    store.seed(TENANTS_TABLE, id=1, name="A", identifier_prefix="A")
    store.seed(TENANTS_TABLE, id=2, name="B", identifier_prefix="B")
    await identifier_service.allocate_identifier(1, 2025)
    second = await identifier_service.allocate_identifier(2, 2025)
    assert second.identifier == "B-2025-0001"


async def test_year_defaults_to_now(store, allocator):
    service = IdentifierService(
        store, allocator, "02", now=lambda: datetime(2031, 6, 1, tzinfo=timezone.utc),
    )
    allocation = await service.allocate_identifier(None)
    assert allocation.identifier == "02-2031-0001"


async def test_tenant_lookup_failure_falls_back_to_default_prefix(identifier_service, store):
    store.fail_tables.add(TENANTS_TABLE)
    allocation = await identifier_service.allocate_identifier(9, 2025)
    assert allocation.identifier == "02-2025-0001"


async def test_every_candidate_taken_returns_error(store, sleep):
    allocator = SequenceAllocator(store, BackoffPolicy(max_attempts=3, base_delay_ms=1), sleep=sleep)
    service = IdentifierService(store, allocator, "02")
    for n in range(1, 4):
        store.seed(WORK_ORDERS_TABLE, tenant_id=None, identifier=f"02-2025-{n:04d}", name="x")

    allocation = await service.allocate_identifier(None, 2025)

    assert not allocation.ok
    assert allocation.identifier is None
    assert isinstance(allocation.error, AllocationExhaustedError)
    assert allocation.error.retryable


async def test_allocator_exhaustion_returns_error(store, sleep):
    allocator = SequenceAllocator(store, BackoffPolicy(max_attempts=2, base_delay_ms=1), sleep=sleep)
    service = IdentifierService(store, allocator, "02")
    store.seed(COUNTERS_TABLE, scope_key="global", year=2025, next_value=1)

    def always_lose(table, patch, filter):
        for row in store.tables[COUNTERS_TABLE]:
            row["next_value"] += 1

    store.before_update = always_lose

    allocation = await service.allocate_identifier(None, 2025)
    assert isinstance(allocation.error, AllocationExhaustedError)
    assert allocation.error.context.tenant_id is None
