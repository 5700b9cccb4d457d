"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

Creates the hall booking tables:
- Users (faculty and admins)
- Halls
- Bookings
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="faculty", index=True),
        sa.Column("department", sa.String(100)),
        sa.Column("phone", sa.String(10)),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )

    # ==================== HALLS ====================
    op.create_table(
        "halls",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("hall_number", sa.String(50), unique=True, nullable=False, index=True),
        sa.Column("building", sa.String(100), nullable=False),
        sa.Column("floor", sa.Integer, nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="lecture", index=True),
        sa.Column("facilities", sa.JSON),
        sa.Column("description", sa.Text),
        sa.Column("is_available", sa.Boolean, server_default=sa.true(), index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("floor >= 0", name="ck_halls_floor_non_negative"),
        sa.CheckConstraint("capacity BETWEEN 1 AND 1000", name="ck_halls_capacity_range"),
    )
    op.create_index("ix_halls_building_floor", "halls", ["building", "floor"])

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("hall_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("halls.id", ondelete="CASCADE"), nullable=False),
        sa.Column("booked_by_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("date", sa.Date, nullable=False, index=True),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("purpose", sa.String(500), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False, server_default="lecture"),
        sa.Column("expected_attendees", sa.Integer),
        sa.Column("notes", sa.Text),
        sa.Column("status", sa.String(20), server_default="pending", index=True),
        sa.Column("approved_by_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("approval_date", sa.DateTime(timezone=True)),
        sa.Column("rejection_reason", sa.String(500)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_bookings_slot", "bookings", ["hall_id", "date", "start_time", "end_time"])
    op.create_index("ix_bookings_booked_by_date", "bookings", ["booked_by_id", "date"])


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_index("ix_bookings_booked_by_date", table_name="bookings")
    op.drop_index("ix_bookings_slot", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_halls_building_floor", table_name="halls")
    op.drop_table("halls")
    op.drop_table("users")
