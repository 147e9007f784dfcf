"""Boundary Protocols — contracts between core services and the persistence shell.

Invariants:
    - Services NEVER import a concrete store — dependency arrows point inward only
    - Filters are equality-only dicts; a None value matches SQL NULL
    - insert raises UniqueViolationError on duplicates (the allocator's race path depends on it)
    - update returns the number of rows it changed; 0 means the filter no longer matched

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Table-name + filter shape instead of per-entity repositories: the allocator's
      compare-and-set is just update() with the observed value in the filter
"""

from typing import Any, Protocol


Row = dict[str, Any]


class RecordStore(Protocol):
    """Contract for keyed table access — implemented by infrastructure/record_store.py."""
    async def get(self, table: str, filter: Row) -> Row | None: ...
    async def insert(self, table: str, row: Row) -> Row: ...
    async def update(self, table: str, patch: Row, filter: Row) -> int: ...
