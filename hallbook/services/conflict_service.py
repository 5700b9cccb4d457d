"""Booking conflict detection."""

from collections.abc import Iterable
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hallbook.domain.booking_state import ACTIVE_STATUSES
from hallbook.domain.timeslot import intervals_overlap, parse_interval, parse_time
from hallbook.models.booking import Booking


class ConflictService:
    """Decides whether a proposed slot overlaps existing bookings.

    Only bookings whose status is in ``statuses`` take part; by default that
    is pending and approved, since rejected and cancelled bookings have
    vacated their slot. Distinct dates never conflict.
    """

    async def get_slot_bookings(
        self,
        db: AsyncSession,
        hall_id: UUID,
        booking_date: date,
        statuses: Iterable[str] = ACTIVE_STATUSES,
        exclude_booking_id: UUID | None = None,
        with_people: bool = False,
    ) -> list[Booking]:
        """Fetch bookings for a hall on one exact date.

        Args:
            db: Database session
            hall_id: Hall to inspect
            booking_date: Calendar day
            statuses: Statuses that participate
            exclude_booking_id: Booking to leave out (the one being edited/approved)
            with_people: Eager-load the booker for read-side projections

        Returns:
            Matching bookings, unordered
        """
        query = select(Booking).where(
            Booking.hall_id == hall_id,
            Booking.date == booking_date,
            Booking.status.in_(list(statuses)),
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)
        if with_people:
            query = query.options(selectinload(Booking.booked_by))

        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_conflict(
        self,
        db: AsyncSession,
        hall_id: UUID,
        booking_date: date,
        start_time: str,
        end_time: str,
        exclude_booking_id: UUID | None = None,
        statuses: Iterable[str] = ACTIVE_STATUSES,
    ) -> Booking | None:
        """Return the first booking overlapping ``[start_time, end_time)``, if any.

        Raises:
            ValidationError: If the proposed times are malformed or end <= start
        """
        start, end = parse_interval(start_time, end_time)
        candidates = await self.get_slot_bookings(
            db, hall_id, booking_date, statuses=statuses, exclude_booking_id=exclude_booking_id
        )
        for booking in candidates:
            if intervals_overlap(start, end, parse_time(booking.start_time), parse_time(booking.end_time)):
                return booking
        return None

    async def has_conflict(
        self,
        db: AsyncSession,
        hall_id: UUID,
        booking_date: date,
        start_time: str,
        end_time: str,
        exclude_booking_id: UUID | None = None,
        statuses: Iterable[str] = ACTIVE_STATUSES,
    ) -> bool:
        """Check whether the proposed slot overlaps any participating booking."""
        conflict = await self.find_conflict(
            db,
            hall_id,
            booking_date,
            start_time,
            end_time,
            exclude_booking_id=exclude_booking_id,
            statuses=statuses,
        )
        return conflict is not None


conflict_service = ConflictService()
