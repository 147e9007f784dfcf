"""AppSetting ORM — opaque key/value settings, optionally scoped to a tenant.

Invariants:
    - tenant_id NULL = global setting
    - value NULL or blank = not configured (callers fall through to the next tier)

Design Decisions:
    - Key/value over typed columns: storage paths are the only consumer and new keys
      (legacy external-service path) need no migration
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from orderdocs.db.base import Base


class AppSetting(Base):
    """Setting row read by the storage locator and written by the settings routes."""
    __tablename__ = "app_settings"
    __table_args__ = (
        UniqueConstraint("key", "tenant_id", name="uq_app_settings_key_tenant"),
        Index(
            "uq_app_settings_global_key", "key", unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), nullable=False)
    tenant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tenants.id"), nullable=True,
    )
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
