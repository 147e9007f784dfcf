"""Work Orders — allocate an identifier, bind it with a durable row, then build its folders.

Invariants:
    - The work_orders row is written before any folder; folder trouble never rolls it back
    - A unique violation on insert means the identifier was taken in between the
      check and the insert: a fresh identifier is allocated (bounded)
    - Allocation exhaustion is raised as AllocationExhaustedError (retryable, 503)
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from orderdocs.core.domain_types import WORK_ORDERS_TABLE
from orderdocs.core.errors import AllocationExhaustedError, ErrorContext, UniqueViolationError
from orderdocs.core.results import CreatedWorkOrder
from orderdocs.services.directory_manager import DirectoryManager
from orderdocs.services.identifier_service import IdentifierService

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 5


class WorkOrders:
    def __init__(
        self,
        identifiers: IdentifierService,
        directories: DirectoryManager,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.identifiers = identifiers
        self.directories = directories
        self.now = now

    async def create(self, name: str, tenant_id: int | None = None) -> CreatedWorkOrder:
        store = self.identifiers.store
        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            allocation = await self.identifiers.allocate_identifier(tenant_id)
            if not allocation.ok:
                raise allocation.error
            try:
                row = await store.insert(WORK_ORDERS_TABLE, {
                    "tenant_id": tenant_id,
                    "identifier": allocation.identifier,
                    "name": name,
                    "created_at": self.now(),
                })
            except UniqueViolationError:
                logger.warning(
                    f"Identifier {allocation.identifier} taken before insert, reallocating",
                    extra={"identifier": allocation.identifier, "attempt": attempt},
                )
                continue

            directory = await self.directories.ensure(allocation.identifier, tenant_id)
            logger.info(
                "Created work order",
                extra={"identifier": allocation.identifier, "tenant_id": tenant_id},
            )
            return CreatedWorkOrder(
                id=row["id"],
                identifier=allocation.identifier,
                name=name,
                tenant_id=tenant_id,
                directory=directory,
            )

        raise AllocationExhaustedError(
            f"Could not store a work order after {MAX_INSERT_ATTEMPTS} identifier attempts",
            attempts=MAX_INSERT_ATTEMPTS,
            context=ErrorContext(tenant_id=tenant_id),
        )
