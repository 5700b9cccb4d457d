"""API dependencies for authentication and role checks."""

from collections.abc import Callable
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hallbook.core.exceptions import AuthenticationError, AuthorizationError
from hallbook.core.permissions import Permission, has_permission
from hallbook.core.security import verify_token
from hallbook.database import get_db
from hallbook.models.user import User

# Security scheme
security = HTTPBearer(auto_error=False)

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "require_permission",
]


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user and verify the account is active."""
    if not current_user.is_active:
        raise AuthenticationError("User account is deactivated")
    return current_user


def require_permission(permission: Permission) -> Callable[..., Any]:
    """Dependency to require a specific permission."""

    async def permission_checker(
        current_user: Annotated[User, Depends(get_current_active_user)],
    ) -> User:
        if not has_permission(current_user.role, permission):
            raise AuthorizationError(
                f"Permission '{permission.value}' is required for this action"
            )
        return current_user

    return permission_checker


# Convenience dependencies
require_hall_manager = require_permission(Permission.MANAGE_HALLS)
require_booking_creator = require_permission(Permission.CREATE_BOOKING)
