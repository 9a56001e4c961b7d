"""add report table

Revision ID: 8f3b2d61c0a4
Revises: 5c1e0a7d9b42
Create Date: 2026-10-19 15:40:02.771904

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8f3b2d61c0a4"
down_revision: Union[str, Sequence[str], None] = "5c1e0a7d9b42"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the report table."""
    op.create_table(
        "report",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reporter_id", sa.Integer(), nullable=False),
        sa.Column("target_type", sa.String(length=20), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("processed_by", sa.Integer(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("target_type IN ('post', 'resource')", name="ck_report_target_type"),
        sa.ForeignKeyConstraint(["reporter_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["user_account.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_report_target", "report", ["target_type", "target_id"])
    op.create_index("ix_report_reporter_status", "report", ["reporter_id", "status"])


def downgrade() -> None:
    """Drop the report table."""
    op.drop_index("ix_report_reporter_status", table_name="report")
    op.drop_index("ix_report_target", table_name="report")
    op.drop_table("report")
