"""WorkOrder ORM — durable record that binds an identifier for good.

Invariants:
    - (tenant_id, identifier) is unique: the authority for identifier uniqueness
    - tenant_id NULL means the shared/global scope; identifiers there are unique too

Design Decisions:
    - Uniqueness scoped per tenant: tenants may share a prefix and each run their own counter
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from orderdocs.db.base import Base


class WorkOrder(Base):
    """Work order record; only the identifier matters to this service."""
    __tablename__ = "work_orders"
    __table_args__ = (
        UniqueConstraint("tenant_id", "identifier", name="uq_work_orders_tenant_identifier"),
        # NULLs are distinct in unique constraints; global rows need their own index
        Index(
            "uq_work_orders_global_identifier", "identifier", unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tenants.id"), nullable=True, index=True,
    )
    identifier: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
