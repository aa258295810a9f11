"""request_ledger_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:12:31.402115

"""

from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "counters",
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("current_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "request_headers",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("location", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("warehouse_code", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("request_date", sqlmodel.sql.sqltypes.AutoString(length=10), nullable=False),
        sa.Column("request_day", sa.Date(), nullable=False),
        sa.Column("catalog", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("submitted_by", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("cost_center", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("exported_downstream", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("location", "warehouse_code", "request_date", name="uq_request_header_key"),
    )
    op.create_index(
        "ix_request_headers_location_warehouse_day",
        "request_headers",
        ["location", "warehouse_code", "request_day"],
        unique=False,
    )

    op.create_table(
        "request_positions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("header_id", sa.Integer(), nullable=False),
        sa.Column("product_code", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("notes", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column("submitted_by", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_request_position_quantity_positive"),
        sa.ForeignKeyConstraint(["header_id"], ["request_headers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_request_positions_header_id"), "request_positions", ["header_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_request_positions_header_id"), table_name="request_positions")
    op.drop_table("request_positions")
    op.drop_index("ix_request_headers_location_warehouse_day", table_name="request_headers")
    op.drop_table("request_headers")
    op.drop_table("counters")
