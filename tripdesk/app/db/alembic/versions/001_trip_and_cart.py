"""Trip and cart tables

Revision ID: 001
Revises:
Create Date: 2026-10-18

- trip: one row per planned trip, ordered by surrogate id
- cart: at most one cart per (owner, trip), versioned for compare-and-swap
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create trip and cart tables."""
    op.create_table(
        "trip",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Text(), nullable=False),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("destination", sa.Text(), nullable=False),
        sa.Column("origin", sa.Text(), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("budget", postgresql.JSONB(), nullable=False),
        sa.Column("travelers", sa.Integer(), nullable=False),
        sa.Column("interests", postgresql.JSONB(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("itinerary", postgresql.JSONB(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("trip_id"),
        sa.CheckConstraint(
            "status IN ('generating', 'completed', 'failed')", name="ck_trip_status"
        ),
    )
    op.create_index("idx_trip_owner", "trip", ["owner_id", "id"])

    op.create_table(
        "cart",
        sa.Column("cart_id", sa.Text(), primary_key=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("trip_id", sa.Text(), nullable=False),
        sa.Column("items", postgresql.JSONB(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("owner_id", "trip_id", name="uq_cart_owner_trip"),
        sa.CheckConstraint(
            "status IN ('pending', 'checkout', 'completed')", name="ck_cart_status"
        ),
    )


def downgrade() -> None:
    """Drop trip and cart tables."""
    op.drop_table("cart")
    op.drop_index("idx_trip_owner", table_name="trip")
    op.drop_table("trip")
