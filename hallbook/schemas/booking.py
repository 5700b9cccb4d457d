"""Booking-related Pydantic schemas."""

import datetime as dt
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hallbook.domain.timeslot import TIME_PATTERN, normalize_time, parse_time
from hallbook.schemas.hall import HallSummary
from hallbook.schemas.user import UserSummary

EventType = Literal["lecture", "seminar", "workshop", "meeting", "exam", "event", "other"]
BookingStatus = Literal["pending", "approved", "rejected", "cancelled"]


def _validate_time(v: str | None) -> str | None:
    if v is None:
        return v
    if not TIME_PATTERN.match(v.strip()):
        raise ValueError("Time must be in HH:MM format")
    return normalize_time(v)


def _validate_purpose(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if len(v) < 5:
        raise ValueError("Purpose must be at least 5 characters long")
    return v


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    hall_id: UUID
    date: dt.date
    start_time: str
    end_time: str
    purpose: str = Field(..., max_length=500)
    event_type: EventType = "lecture"
    expected_attendees: int | None = Field(None, ge=1, le=1000)
    notes: str | None = Field(None, max_length=500)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _validate_time(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_after_start(cls, v: str, info) -> str:
        start_time = info.data.get("start_time")
        if start_time and parse_time(v) <= parse_time(start_time):
            raise ValueError("End time must be after start time")
        return v

    @field_validator("purpose")
    @classmethod
    def validate_purpose(cls, v: str) -> str:
        return _validate_purpose(v)


class BookingUpdate(BaseModel):
    """Schema for updating a booking; omitted fields are left unchanged."""

    hall_id: UUID | None = None
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    purpose: str | None = Field(None, max_length=500)
    event_type: EventType | None = None
    expected_attendees: int | None = Field(None, ge=1, le=1000)
    notes: str | None = Field(None, max_length=500)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str | None) -> str | None:
        return _validate_time(v)

    @field_validator("purpose")
    @classmethod
    def validate_purpose(cls, v: str | None) -> str | None:
        return _validate_purpose(v)


class BookingRejectRequest(BaseModel):
    """Schema for rejecting a booking."""

    rejection_reason: str | None = Field(None, max_length=500)


class BookingResponse(BaseModel):
    """Schema for booking response with hall and people summaries."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    hall: HallSummary
    booked_by: UserSummary
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    purpose: str
    event_type: str
    expected_attendees: int | None
    notes: str | None

    # Status
    status: str
    approved_by: UserSummary | None
    approval_date: dt.datetime | None
    rejection_reason: str | None

    # Timestamps
    created_at: dt.datetime
    updated_at: dt.datetime


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int


class SlotCheckRequest(BaseModel):
    """Schema for asking whether a slot is free."""

    hall_id: UUID
    date: dt.date
    start_time: str
    end_time: str
    exclude_booking_id: UUID | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _validate_time(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_after_start(cls, v: str, info) -> str:
        start_time = info.data.get("start_time")
        if start_time and parse_time(v) <= parse_time(start_time):
            raise ValueError("End time must be after start time")
        return v


class SlotCheckResponse(BaseModel):
    """Schema for slot check result."""

    hall_id: UUID
    date: dt.date
    start_time: str
    end_time: str
    conflict: bool


class AvailabilityHall(BaseModel):
    """Hall block of an availability response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    hall_number: str
    building: str
    floor: int
    is_available: bool


class AvailabilitySlot(BaseModel):
    """An occupied slot on the requested day."""

    booking_id: UUID
    start_time: str
    end_time: str
    status: str
    purpose: str
    booked_by: str


class AvailabilityResponse(BaseModel):
    """Schema for a hall's occupancy on one date."""

    hall: AvailabilityHall
    date: dt.date
    bookings: list[AvailabilitySlot]
