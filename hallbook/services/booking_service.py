"""Booking lifecycle service.

Owns every status change of a booking. Creation and edits are optimistic:
by default they only refuse slots already held by an *approved* booking,
so several pending requests may compete for one slot. Approval closes the
race by re-running the conflict check under a lock on the hall row.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hallbook.config import settings
from hallbook.core.exceptions import (
    AuthorizationError,
    CapacityExceeded,
    HallNotAvailable,
    InvalidTransition,
    NotFoundError,
    SlotConflict,
    ValidationError,
)
from hallbook.core.permissions import UserRole, is_admin, is_authorized
from hallbook.domain.booking_state import (
    ACTIVE_STATUSES,
    APPROVED,
    CANCELLED,
    PENDING,
    REJECTED,
    assert_booking_transition,
    can_approve,
    can_cancel,
    can_edit,
    can_reject,
)
from hallbook.domain.timeslot import parse_interval, parse_time
from hallbook.models.booking import Booking
from hallbook.models.hall import Hall
from hallbook.models.user import User
from hallbook.schemas.booking import BookingCreate, BookingUpdate
from hallbook.services.conflict_service import ConflictService, conflict_service

logger = logging.getLogger(__name__)

APPROVED_ONLY = frozenset({APPROVED})


def local_now() -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(ZoneInfo(settings.timezone))


class BookingService:
    """Service for the booking lifecycle: create, edit, approve, reject, cancel, delete."""

    def __init__(
        self,
        conflicts: ConflictService = conflict_service,
        clock: Callable[[], datetime] = local_now,
        pending_blocks_slot: bool | None = None,
    ) -> None:
        self.conflicts = conflicts
        self.clock = clock
        self._pending_blocks_slot = pending_blocks_slot

    @property
    def pending_blocks_slot(self) -> bool:
        if self._pending_blocks_slot is None:
            return settings.pending_blocks_slot
        return self._pending_blocks_slot

    @property
    def blocking_statuses(self) -> frozenset[str]:
        """Statuses that refuse a new or moved booking."""
        return ACTIVE_STATUSES if self.pending_blocks_slot else APPROVED_ONLY

    def today(self) -> date:
        return self.clock().date()

    # ------------------------------------------------------------------ #
    # Lookups and guards
    # ------------------------------------------------------------------ #

    async def _load_booking(self, db: AsyncSession, booking_id: UUID) -> Booking:
        """Load a booking with hall, booker and approver summaries."""
        result = await db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .options(
                selectinload(Booking.hall),
                selectinload(Booking.booked_by),
                selectinload(Booking.approved_by),
            )
            .execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def get_hall(self, db: AsyncSession, hall_id: UUID, for_update: bool = False) -> Hall:
        """Load a hall, optionally locking its row.

        Raises:
            NotFoundError: If no hall has this id
        """
        query = select(Hall).where(Hall.id == hall_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        hall = result.scalar_one_or_none()
        if not hall:
            raise NotFoundError("Hall", str(hall_id))
        return hall

    def _check_date(self, booking_date: date) -> None:
        if booking_date < self.today():
            raise ValidationError("Booking date cannot be in the past")

    @staticmethod
    def _check_bookable(hall: Hall) -> None:
        if not hall.is_available:
            raise HallNotAvailable()

    @staticmethod
    def _check_capacity(hall: Hall, attendees: int | None) -> None:
        if attendees and attendees > hall.capacity:
            raise CapacityExceeded(attendees, hall.capacity)

    @staticmethod
    def _require_admin(actor: User, action: str) -> None:
        if not is_authorized(actor.id, actor.role, required_role=UserRole.ADMIN):
            raise AuthorizationError(f"Only administrators can {action} bookings")

    @staticmethod
    def _require_owner_or_admin(actor: User, booking: Booking, action: str) -> None:
        if not is_authorized(actor.id, actor.role, owner_id=booking.booked_by_id):
            raise AuthorizationError(f"Not authorized to {action} this booking")

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def create_booking(self, db: AsyncSession, actor: User, data: BookingCreate) -> Booking:
        """Create a booking in pending state."""
        parse_interval(data.start_time, data.end_time)
        self._check_date(data.date)

        hall = await self.get_hall(db, data.hall_id)
        self._check_bookable(hall)
        self._check_capacity(hall, data.expected_attendees)

        if await self.conflicts.has_conflict(
            db,
            hall.id,
            data.date,
            data.start_time,
            data.end_time,
            statuses=self.blocking_statuses,
        ):
            raise SlotConflict()

        booking = Booking(
            hall_id=hall.id,
            booked_by_id=actor.id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            purpose=data.purpose,
            event_type=data.event_type,
            expected_attendees=data.expected_attendees,
            notes=data.notes,
            status=PENDING,
        )
        db.add(booking)
        await db.flush()

        logger.info(
            f"Booking {booking.id} created by {actor.id} for hall {hall.id} "
            f"on {data.date} {data.start_time}-{data.end_time}"
        )
        return await self._load_booking(db, booking.id)

    async def update_booking(
        self, db: AsyncSession, actor: User, booking_id: UUID, data: BookingUpdate
    ) -> Booking:
        """Edit a booking.

        Moving the hall, date or time re-checks the slot and sends the
        booking back to pending; descriptive edits keep the status.
        """
        booking = await self._load_booking(db, booking_id)
        self._require_owner_or_admin(actor, booking, "update")

        allowed, error = can_edit(booking.status)
        if not allowed:
            raise InvalidTransition(error)
        if booking.status == APPROVED and not is_admin(actor.role):
            raise AuthorizationError("Cannot update approved booking. Please contact admin.")

        changes = data.model_dump(exclude_unset=True)

        new_hall_id = changes.get("hall_id") or booking.hall_id
        new_date = changes.get("date") or booking.date
        new_start = changes.get("start_time") or booking.start_time
        new_end = changes.get("end_time") or booking.end_time

        hall_changed = new_hall_id != booking.hall_id
        slot_changed = (
            hall_changed
            or new_date != booking.date
            or new_start != booking.start_time
            or new_end != booking.end_time
        )

        if slot_changed:
            parse_interval(new_start, new_end)
            if new_date != booking.date:
                self._check_date(new_date)

        hall = booking.hall
        if hall_changed:
            hall = await self.get_hall(db, new_hall_id)
            self._check_bookable(hall)

        attendees = changes.get("expected_attendees", booking.expected_attendees)
        if hall_changed or "expected_attendees" in changes:
            self._check_capacity(hall, attendees)

        if slot_changed:
            if await self.conflicts.has_conflict(
                db,
                new_hall_id,
                new_date,
                new_start,
                new_end,
                exclude_booking_id=booking.id,
                statuses=self.blocking_statuses,
            ):
                raise SlotConflict()

            assert_booking_transition(booking.status, PENDING)
            previous_status = booking.status
            booking.hall_id = new_hall_id
            booking.date = new_date
            booking.start_time = new_start
            booking.end_time = new_end
            booking.status = PENDING
            booking.approved_by_id = None
            booking.approval_date = None
            if previous_status == APPROVED:
                logger.info(f"Booking {booking.id} moved by {actor.id}; approval withdrawn")

        for field in ("purpose", "event_type"):
            if changes.get(field) is not None:
                setattr(booking, field, changes[field])
        if "expected_attendees" in changes:
            booking.expected_attendees = changes["expected_attendees"]
        if "notes" in changes:
            booking.notes = changes["notes"]

        await db.flush()
        logger.info(f"Booking {booking.id} updated by {actor.id}")
        return await self._load_booking(db, booking.id)

    async def approve_booking(self, db: AsyncSession, actor: User, booking_id: UUID) -> Booking:
        """Approve a pending booking after a final conflict check."""
        self._require_admin(actor, "approve")
        booking = await self._load_booking(db, booking_id)

        allowed, error = can_approve(booking.status)
        if not allowed:
            raise InvalidTransition(error)

        # Serializes concurrent approvals for the same hall
        await self.get_hall(db, booking.hall_id, for_update=True)

        conflict = await self.conflicts.find_conflict(
            db,
            booking.hall_id,
            booking.date,
            booking.start_time,
            booking.end_time,
            exclude_booking_id=booking.id,
            statuses=APPROVED_ONLY,
        )
        if conflict is not None:
            logger.warning(
                f"Approval of booking {booking.id} refused: slot held by approved booking {conflict.id}"
            )
            raise SlotConflict(
                "Cannot approve: This time slot has been booked by another approved booking"
            )

        assert_booking_transition(booking.status, APPROVED)
        booking.status = APPROVED
        booking.approved_by_id = actor.id
        booking.approval_date = self.clock()
        booking.rejection_reason = None

        await db.flush()
        logger.info(f"Booking {booking.id} approved by {actor.id}")
        return await self._load_booking(db, booking.id)

    async def reject_booking(
        self, db: AsyncSession, actor: User, booking_id: UUID, rejection_reason: str | None
    ) -> Booking:
        """Reject a pending booking with a reason."""
        self._require_admin(actor, "reject")
        if not rejection_reason or not rejection_reason.strip():
            raise ValidationError("Please provide a rejection reason")

        booking = await self._load_booking(db, booking_id)
        allowed, error = can_reject(booking.status)
        if not allowed:
            raise InvalidTransition(error)

        assert_booking_transition(booking.status, REJECTED)
        booking.status = REJECTED
        booking.approved_by_id = actor.id
        booking.approval_date = self.clock()
        booking.rejection_reason = rejection_reason.strip()

        await db.flush()
        logger.info(f"Booking {booking.id} rejected by {actor.id}")
        return await self._load_booking(db, booking.id)

    async def cancel_booking(self, db: AsyncSession, actor: User, booking_id: UUID) -> Booking:
        """Cancel a pending or approved booking (creator or admin)."""
        booking = await self._load_booking(db, booking_id)
        self._require_owner_or_admin(actor, booking, "cancel")

        allowed, error = can_cancel(booking.status)
        if not allowed:
            raise InvalidTransition(error)

        assert_booking_transition(booking.status, CANCELLED)
        booking.status = CANCELLED

        await db.flush()
        logger.info(f"Booking {booking.id} cancelled by {actor.id}")
        return await self._load_booking(db, booking.id)

    async def delete_booking(self, db: AsyncSession, actor: User, booking_id: UUID) -> None:
        """Remove a booking record (admin only)."""
        self._require_admin(actor, "delete")
        booking = await self._load_booking(db, booking_id)
        await db.delete(booking)
        await db.flush()
        logger.info(f"Booking {booking_id} deleted by {actor.id}")

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    async def get_booking(self, db: AsyncSession, actor: User, booking_id: UUID) -> Booking:
        booking = await self._load_booking(db, booking_id)
        self._require_owner_or_admin(actor, booking, "view")
        return booking

    async def list_bookings(
        self,
        db: AsyncSession,
        actor: User,
        status: str | None = None,
        hall_id: UUID | None = None,
        booking_date: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Booking], int]:
        """List bookings visible to the actor.

        Admins see everything; everyone else only their own bookings.

        Returns:
            Tuple of (bookings for the page, total matching)
        """
        query = select(Booking)
        if not is_admin(actor.role):
            query = query.where(Booking.booked_by_id == actor.id)
        if status:
            query = query.where(Booking.status == status)
        if hall_id:
            query = query.where(Booking.hall_id == hall_id)
        if booking_date:
            query = query.where(Booking.date == booking_date)
        if start_date and end_date:
            if end_date < start_date:
                raise ValidationError("end_date must not be before start_date")
            query = query.where(Booking.date >= start_date, Booking.date <= end_date)

        count_result = await db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar() or 0

        offset = (page - 1) * page_size
        query = (
            query.options(
                selectinload(Booking.hall),
                selectinload(Booking.booked_by),
                selectinload(Booking.approved_by),
            )
            .order_by(Booking.date, Booking.start_time)
            .offset(offset)
            .limit(page_size)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def check_slot(
        self,
        db: AsyncSession,
        hall_id: UUID,
        booking_date: date,
        start_time: str,
        end_time: str,
        exclude_booking_id: UUID | None = None,
    ) -> bool:
        """Report whether any pending or approved booking overlaps the slot."""
        await self.get_hall(db, hall_id)
        return await self.conflicts.has_conflict(
            db, hall_id, booking_date, start_time, end_time, exclude_booking_id=exclude_booking_id
        )

    async def get_hall_availability(
        self, db: AsyncSession, hall_id: UUID, booking_date: date
    ) -> dict:
        """Occupied slots of a hall on one date, ordered by start time."""
        hall = await self.get_hall(db, hall_id)
        bookings = await self.conflicts.get_slot_bookings(
            db, hall_id, booking_date, with_people=True
        )
        bookings.sort(key=lambda b: parse_time(b.start_time))

        return {
            "hall": {
                "id": hall.id,
                "name": hall.name,
                "hall_number": hall.hall_number,
                "building": hall.building,
                "floor": hall.floor,
                "is_available": hall.is_available,
            },
            "date": booking_date,
            "bookings": [
                {
                    "booking_id": b.id,
                    "start_time": b.start_time,
                    "end_time": b.end_time,
                    "status": b.status,
                    "purpose": b.purpose,
                    "booked_by": b.booked_by.name,
                }
                for b in bookings
            ],
        }

    async def count_upcoming_active(self, db: AsyncSession, hall_id: UUID) -> int:
        """Count pending/approved bookings of a hall dated today or later."""
        result = await db.execute(
            select(func.count(Booking.id)).where(
                Booking.hall_id == hall_id,
                Booking.status.in_(list(ACTIVE_STATUSES)),
                Booking.date >= self.today(),
            )
        )
        return result.scalar() or 0


booking_service = BookingService()
