"""Identifier Service — allocate, format, then verify against durable records.

Invariants:
    - A returned identifier was absent from work_orders (tenant-scoped) when checked
    - On collision the next counter value is taken; the counter is a hint, records are authoritative
    - Collision retries share the allocation budget size (policy.max_attempts)
    - Never raises allocation errors: failures come back inside IdentifierAllocation

Design Decisions:
    - Two-phase allocate-then-verify because the counter and work_orders are not
      written in one transaction (partial failures, legacy manual inserts)
    - Tenant prefix lookup failures fall back to the default prefix with a warning
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from orderdocs.core.domain_types import (
    TENANTS_TABLE,
    WORK_ORDERS_TABLE,
    scope_key_for,
)
from orderdocs.core.errors import (
    AllocationExhaustedError,
    ErrorContext,
    OrderDocsError,
)
from orderdocs.core.identifiers import format_identifier, resolve_prefix
from orderdocs.core.repository_protocols import RecordStore
from orderdocs.core.results import IdentifierAllocation
from orderdocs.services.sequence_allocator import SequenceAllocator

logger = logging.getLogger(__name__)


class IdentifierService:
    """Issues public work-order identifiers."""

    def __init__(
        self,
        store: RecordStore,
        allocator: SequenceAllocator,
        default_prefix: str,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.allocator = allocator
        self.default_prefix = default_prefix
        self.now = now

    async def prefix_for(self, tenant_id: int | None) -> str:
        if tenant_id is None:
            return self.default_prefix
        try:
            tenant = await self.store.get(TENANTS_TABLE, {"id": tenant_id})
        except OrderDocsError as e:
            logger.warning(
                f"Tenant lookup failed, using default prefix: {e.message}",
                extra={"tenant_id": tenant_id},
            )
            return self.default_prefix
        return resolve_prefix(
            tenant.get("identifier_prefix") if tenant else None, self.default_prefix,
        )

    async def is_taken(self, identifier: str, tenant_id: int | None) -> bool:
        filter = {"identifier": identifier}
        if tenant_id is not None:
            filter["tenant_id"] = tenant_id
        return await self.store.get(WORK_ORDERS_TABLE, filter) is not None

    async def allocate_identifier(
        self, tenant_id: int | None, year: int | None = None,
    ) -> IdentifierAllocation:
        """Allocate the next free identifier for tenant_id (None = global scope)."""
        year = year or self.now().year
        prefix = await self.prefix_for(tenant_id)
        scope = scope_key_for(tenant_id)
        max_attempts = self.allocator.policy.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                sequence = await self.allocator.allocate(scope, year)
            except AllocationExhaustedError as e:
                e.context.tenant_id = tenant_id
                return IdentifierAllocation(None, None, prefix, year, attempt, error=e)

            identifier = format_identifier(prefix, year, sequence)
            if not await self.is_taken(identifier, tenant_id):
                logger.info(
                    "Allocated identifier",
                    extra={"identifier": identifier, "tenant_id": tenant_id, "attempt": attempt},
                )
                return IdentifierAllocation(identifier, sequence, prefix, year, attempt)

            logger.warning(
                f"Identifier {identifier} already exists, counter out of sync",
                extra={"identifier": identifier, "tenant_id": tenant_id, "attempt": attempt},
            )

        error = AllocationExhaustedError(
            f"No free identifier for {scope}/{year} after {max_attempts} attempts",
            attempts=max_attempts,
            context=ErrorContext(tenant_id=tenant_id),
        )
        return IdentifierAllocation(None, None, prefix, year, max_attempts, error=error)
