"""Booking-related database models."""

from __future__ import annotations

import datetime as dt
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from hallbook.database import Base
from hallbook.domain.timeslot import duration_minutes

if TYPE_CHECKING:
    from hallbook.models.hall import Hall
    from hallbook.models.user import User


class Booking(Base):
    """Hall reservation request."""

    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_slot", "hall_id", "date", "start_time", "end_time"),
        Index("ix_bookings_booked_by_date", "booked_by_id", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    hall_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("halls.id", ondelete="CASCADE"), nullable=False
    )
    booked_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False
    )

    # Slot: calendar day plus zero-padded HH:MM bounds, half-open
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    purpose: Mapped[str] = mapped_column(String(500), nullable=False)
    event_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="lecture"
    )  # lecture, seminar, workshop, meeting, exam, event, other
    expected_attendees: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, approved, rejected, cancelled

    # Approval (set by the admin who approved or rejected)
    approved_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL")
    )
    approval_date: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True))
    rejection_reason: Mapped[str | None] = mapped_column(String(500))

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    hall: Mapped["Hall"] = relationship("Hall", back_populates="bookings")
    booked_by: Mapped["User"] = relationship(
        "User", back_populates="bookings", foreign_keys=[booked_by_id]
    )
    approved_by: Mapped["User | None"] = relationship("User", foreign_keys=[approved_by_id])

    @property
    def duration(self) -> int:
        """Length of the slot in minutes."""
        return duration_minutes(self.start_time, self.end_time)
