"""Tenant ORM — minimal tenant row; account management lives elsewhere.

Invariants:
    - identifier_prefix NULL/blank means "use the deployment default prefix"
"""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from orderdocs.db.base import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    identifier_prefix: Mapped[str | None] = mapped_column(String(10), nullable=True)
