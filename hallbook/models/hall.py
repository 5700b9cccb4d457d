"""Hall inventory model."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from hallbook.database import Base

if TYPE_CHECKING:
    from hallbook.models.booking import Booking


class Hall(Base):
    """Bookable hall."""

    __tablename__ = "halls"
    __table_args__ = (
        Index("ix_halls_building_floor", "building", "floor"),
        CheckConstraint("floor >= 0", name="ck_halls_floor_non_negative"),
        CheckConstraint("capacity BETWEEN 1 AND 1000", name="ck_halls_capacity_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    hall_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    building: Mapped[str] = mapped_column(String(100), nullable=False)
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="lecture", index=True
    )  # lecture, seminar, lab, auditorium, conference, other
    facilities: Mapped[list[str]] = mapped_column(JSON, default=list)  # projector, whiteboard, AC...
    description: Mapped[str | None] = mapped_column(Text)

    # False while the hall is under maintenance
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="hall", cascade="all, delete-orphan"
    )

    @property
    def location(self) -> str:
        """Human readable location."""
        return f"{self.building}, Floor {self.floor}, Hall {self.hall_number}"
