"""User-related Pydantic schemas."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

PHONE_PATTERN = r"^[0-9]{10}$"


class UserBase(BaseModel):
    """Base user schema."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    department: str | None = Field(None, max_length=100)
    phone: str | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not re.match(PHONE_PATTERN, v):
            raise ValueError("Please provide a valid 10-digit phone number")
        return v


class UserCreate(UserBase):
    """Schema for user registration.

    Self-registration always yields a faculty account; admins are
    provisioned with ``scripts/create_admin.py``.
    """

    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(BaseModel):
    """Schema for updating own profile."""

    name: str | None = Field(None, min_length=2, max_length=100)
    department: str | None = Field(None, max_length=100)
    phone: str | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not re.match(PHONE_PATTERN, v):
            raise ValueError("Please provide a valid 10-digit phone number")
        return v


class PasswordChange(BaseModel):
    """Schema for changing own password."""

    current_password: str
    new_password: str = Field(..., min_length=6, max_length=128)


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str
    department: str | None
    phone: str | None
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None


class UserSummary(BaseModel):
    """Compact user projection embedded in booking responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    department: str | None = None


class TokenResponse(BaseModel):
    """Schema for authentication tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing an access token."""

    refresh_token: str
