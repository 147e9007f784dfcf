"""SequenceCounter ORM — persisted next value per (scope, year) for identifier allocation.

Invariants:
    - Exactly one row per (scope_key, year) (unique constraint)
    - next_value only ever grows; rows are never deleted
    - Mutated only via compare-and-set update filtered on the observed next_value

Design Decisions:
    - scope_key as string: tenant id rendered as text, or "global" for the shared domain
    - Unique constraint is what turns a concurrent first insert into UniqueViolationError
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from orderdocs.db.base import Base


class SequenceCounter(Base):
    """Counter row consumed by services/sequence_allocator.py."""
    __tablename__ = "sequence_counters"
    __table_args__ = (
        UniqueConstraint("scope_key", "year", name="uq_sequence_counters_scope_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scope_key: Mapped[str] = mapped_column(String(64), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    next_value: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
