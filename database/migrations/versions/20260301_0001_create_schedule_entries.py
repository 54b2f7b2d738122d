"""create schedule entries

Revision ID: 20260301_0001
Revises:
Create Date: 2026-03-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20260301_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "schedule_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("room_id", sa.String(length=36), nullable=True),
        sa.Column("room_name", sa.String(length=100), nullable=True),
        sa.Column("course_name", sa.String(length=200), nullable=False),
        sa.Column("lecturer", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("start_time", sa.String(length=8), nullable=False),
        sa.Column("end_time", sa.String(length=8), nullable=False),
        sa.Column("weekdays", sa.JSON(), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=True),
        sa.Column("effective_to", sa.Date(), nullable=True),
        sa.Column("is_exception", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_schedule_entries_room_id", "schedule_entries", ["room_id"])
    op.create_index(
        "ix_schedule_entries_room_exception_date",
        "schedule_entries",
        ["room_id", "is_exception", "effective_from"],
    )


def downgrade() -> None:
    op.drop_index("ix_schedule_entries_room_exception_date", table_name="schedule_entries")
    op.drop_index("ix_schedule_entries_room_id", table_name="schedule_entries")
    op.drop_table("schedule_entries")
