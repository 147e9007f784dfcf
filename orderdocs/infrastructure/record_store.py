"""SQL Record Store — RecordStore implementation over SQLAlchemy Core tables.

Invariants:
    - Each call runs in its own short session and commits before returning
    - Table names resolve against Base.metadata; unknown names raise ValueError
    - insert maps unique-constraint IntegrityError to UniqueViolationError; other
      integrity failures (foreign keys, NOT NULL) become DatabaseError
    - update returns rowcount, so update(..., filter={..., "next_value": seen}) is a
      compare-and-set usable across processes

Design Decisions:
    - Core statements over ORM instances: the allocator needs the affected-row count
      of a single UPDATE ... WHERE, which the unit-of-work pattern hides
    - sessions is any callable returning an async context manager of AsyncSession:
      db_manager.session in production, a bare async_sessionmaker in tests
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy import Table, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import orderdocs.models  # noqa: F401  (populates Base.metadata)
from orderdocs.core.errors import DatabaseError, UniqueViolationError
from orderdocs.core.repository_protocols import Row
from orderdocs.db.base import Base

logger = logging.getLogger(__name__)

SessionSource = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


class SqlRecordStore:
    """Table + filter access used by the allocator, locator and identifier checks."""

    def __init__(self, sessions: SessionSource):
        self._sessions = sessions

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise ValueError(f"Unknown table: {name}") from None

    @staticmethod
    def _where(table: Table, filter: Row) -> list:
        return [
            table.c[key].is_(None) if value is None else table.c[key] == value
            for key, value in filter.items()
        ]

    async def get(self, table: str, filter: Row) -> Row | None:
        t = self._table(table)
        async with self._sessions() as db:
            result = await db.execute(
                select(t).where(*self._where(t, filter)).limit(1),
            )
            row = result.mappings().first()
        return dict(row) if row else None

    async def insert(self, table: str, row: Row) -> Row:
        t = self._table(table)
        async with self._sessions() as db:
            try:
                result = await db.execute(insert(t).values(**row).returning(*t.c))
                created = dict(result.mappings().one())
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                if _is_unique_violation(e):
                    raise UniqueViolationError(table) from e
                logger.error(f"Insert into {table} violated a constraint: {e.orig}")
                raise DatabaseError("Integrity constraint violated", "insert") from e
        return created

    async def update(self, table: str, patch: Row, filter: Row) -> int:
        t = self._table(table)
        async with self._sessions() as db:
            result = await db.execute(
                update(t).where(*self._where(t, filter)).values(**patch),
            )
            await db.commit()
        return result.rowcount
