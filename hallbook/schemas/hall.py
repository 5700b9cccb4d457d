"""Hall-related Pydantic schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

HallType = Literal["lecture", "seminar", "lab", "auditorium", "conference", "other"]


def _clean_facilities(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    return [f.strip() for f in v if f and f.strip()]


class HallBase(BaseModel):
    """Base hall schema."""

    name: str = Field(..., min_length=2, max_length=100)
    hall_number: str = Field(..., min_length=1, max_length=50)
    building: str = Field(..., min_length=1, max_length=100)
    floor: int = Field(..., ge=0)
    capacity: int = Field(..., ge=1, le=1000)
    type: HallType = "lecture"
    facilities: list[str] = Field(default_factory=list)
    description: str | None = Field(None, max_length=500)
    is_available: bool = True

    @field_validator("name", "hall_number", "building")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank")
        return v

    @field_validator("facilities")
    @classmethod
    def clean_facilities(cls, v: list[str]) -> list[str]:
        return _clean_facilities(v)


class HallCreate(HallBase):
    """Schema for creating a hall."""


class HallUpdate(BaseModel):
    """Schema for updating a hall; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=2, max_length=100)
    hall_number: str | None = Field(None, min_length=1, max_length=50)
    building: str | None = Field(None, min_length=1, max_length=100)
    floor: int | None = Field(None, ge=0)
    capacity: int | None = Field(None, ge=1, le=1000)
    type: HallType | None = None
    facilities: list[str] | None = None
    description: str | None = Field(None, max_length=500)
    is_available: bool | None = None

    @field_validator("facilities")
    @classmethod
    def clean_facilities(cls, v: list[str] | None) -> list[str] | None:
        return _clean_facilities(v)


class HallResponse(BaseModel):
    """Schema for hall response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    hall_number: str
    building: str
    floor: int
    capacity: int
    type: str
    facilities: list[str]
    description: str | None
    is_available: bool
    location: str
    created_at: datetime
    updated_at: datetime


class HallSummary(BaseModel):
    """Compact hall projection embedded in booking responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    hall_number: str
    building: str
    floor: int
    capacity: int
    type: str
