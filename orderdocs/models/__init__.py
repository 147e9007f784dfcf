"""ORM Models — SQLAlchemy declarative models for every table the record store touches.

Invariants:
    - All models inherit from Base (db/base.py)
    - Table names match the constants in core/domain_types.py

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before the record store
      or Alembic resolves a table by name
"""

from orderdocs.models.tenant import Tenant  # noqa: F401
from orderdocs.models.work_order import WorkOrder  # noqa: F401
from orderdocs.models.sequence_counter import SequenceCounter  # noqa: F401
from orderdocs.models.app_setting import AppSetting  # noqa: F401
