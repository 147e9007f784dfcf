"""Initial schema — tenants, work_orders, sequence_counters, app_settings.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_GLOBAL_ONLY = sa.text("tenant_id IS NULL")


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("identifier_prefix", sa.String(10), nullable=True),
    )

    op.create_table(
        "work_orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tenant_id", sa.Integer, sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("identifier", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("tenant_id", "identifier", name="uq_work_orders_tenant_identifier"),
    )
    op.create_index("ix_work_orders_tenant_id", "work_orders", ["tenant_id"])
    op.create_index("ix_work_orders_identifier", "work_orders", ["identifier"])
    op.create_index(
        "uq_work_orders_global_identifier", "work_orders", ["identifier"],
        unique=True, postgresql_where=_GLOBAL_ONLY, sqlite_where=_GLOBAL_ONLY,
    )

    op.create_table(
        "sequence_counters",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("scope_key", sa.String(64), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("next_value", sa.Integer, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("scope_key", "year", name="uq_sequence_counters_scope_year"),
    )

    op.create_table(
        "app_settings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("tenant_id", sa.Integer, sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("value", sa.Text, nullable=True),
        sa.Column("updated_by", sa.String(100), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("key", "tenant_id", name="uq_app_settings_key_tenant"),
    )
    op.create_index(
        "uq_app_settings_global_key", "app_settings", ["key"],
        unique=True, postgresql_where=_GLOBAL_ONLY, sqlite_where=_GLOBAL_ONLY,
    )


def downgrade() -> None:
    op.drop_index("uq_app_settings_global_key", table_name="app_settings")
    op.drop_table("app_settings")
    op.drop_table("sequence_counters")
    op.drop_index("uq_work_orders_global_identifier", table_name="work_orders")
    op.drop_index("ix_work_orders_identifier", table_name="work_orders")
    op.drop_index("ix_work_orders_tenant_id", table_name="work_orders")
    op.drop_table("work_orders")
    op.drop_table("tenants")
