"""Booking endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hallbook.api.deps import get_current_active_user, get_db, require_booking_creator
from hallbook.core.middleware import booking_limiter
from hallbook.models.booking import Booking
from hallbook.models.user import User
from hallbook.schemas.booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingListResponse,
    BookingRejectRequest,
    BookingResponse,
    BookingStatus,
    BookingUpdate,
    SlotCheckRequest,
    SlotCheckResponse,
)
from hallbook.services.booking_service import booking_service

router = APIRouter()


@router.get("/availability/{hall_id}/{booking_date}", response_model=AvailabilityResponse)
async def get_hall_availability(
    hall_id: UUID,
    booking_date: date,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Occupied slots of a hall on a date (public)."""
    return await booking_service.get_hall_availability(db, hall_id, booking_date)


@router.post("/check", response_model=SlotCheckResponse)
async def check_slot(
    request: SlotCheckRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SlotCheckResponse:
    """Check whether a slot overlaps any pending or approved booking (public)."""
    conflict = await booking_service.check_slot(
        db,
        request.hall_id,
        request.date,
        request.start_time,
        request.end_time,
        exclude_booking_id=request.exclude_booking_id,
    )
    return SlotCheckResponse(
        hall_id=request.hall_id,
        date=request.date,
        start_time=request.start_time,
        end_time=request.end_time,
        conflict=conflict,
    )


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User, Depends(require_booking_creator)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Request a booking; it stays pending until an admin acts on it."""
    return await booking_service.create_booking(db, current_user, booking_data)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    hall_id: UUID | None = Query(default=None, alias="hall"),
    booking_date: date | None = Query(default=None, alias="date"),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """List bookings; non-admins only see their own."""
    bookings, total = await booking_service.list_bookings(
        db,
        current_user,
        status=status_filter,
        hall_id=hall_id,
        booking_date=booking_date,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get a booking by ID (creator or admin)."""
    return await booking_service.get_booking(db, current_user, booking_id)


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: UUID,
    booking_data: BookingUpdate,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Edit a booking (creator or admin)."""
    return await booking_service.update_booking(db, current_user, booking_id, booking_data)


@router.put("/{booking_id}/approve", response_model=BookingResponse)
async def approve_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Approve a pending booking (admin only)."""
    return await booking_service.approve_booking(db, current_user, booking_id)


@router.put("/{booking_id}/reject", response_model=BookingResponse)
async def reject_booking(
    booking_id: UUID,
    request: BookingRejectRequest,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Reject a pending booking with a reason (admin only)."""
    return await booking_service.reject_booking(
        db, current_user, booking_id, request.rejection_reason
    )


@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Cancel a booking (creator or admin)."""
    return await booking_service.cancel_booking(db, current_user, booking_id)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Delete a booking record (admin only)."""
    await booking_service.delete_booking(db, current_user, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
