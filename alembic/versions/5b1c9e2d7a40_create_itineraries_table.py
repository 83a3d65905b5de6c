"""Create itineraries table.

Revision ID: 5b1c9e2d7a40
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "5b1c9e2d7a40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
  """Upgrade schema."""
  op.create_table(
    "itineraries",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("destination", sa.String(), nullable=False),
    sa.Column("duration_days", sa.Integer(), nullable=False),
    sa.Column("created_at", sa.String(), nullable=False),
    sa.Column("completed_at", sa.String(), nullable=True),
    sa.Column("itinerary_json", sa.Text(), nullable=True),
    sa.Column("error", sa.Text(), nullable=True),
    sa.PrimaryKeyConstraint("id"),
    sa.CheckConstraint("status IN ('processing', 'completed', 'failed')", name="ck_itineraries_status"),
    sa.CheckConstraint("duration_days BETWEEN 1 AND 30", name="ck_itineraries_duration_days"),
  )
  op.create_index("ix_itineraries_status", "itineraries", ["status"], unique=False)


def downgrade() -> None:
  """Downgrade schema."""
  op.drop_index("ix_itineraries_status", table_name="itineraries")
  op.drop_table("itineraries")
