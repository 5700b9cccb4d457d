"""Role-based access control and the booking authorization guard."""

from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """User roles in the system."""

    FACULTY = "faculty"
    ADMIN = "admin"


class Permission(str, Enum):
    """Route-level permissions; per-booking decisions go through ``is_authorized``."""

    MANAGE_HALLS = "manage_halls"
    CREATE_BOOKING = "create_booking"


ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.FACULTY: {Permission.CREATE_BOOKING},
    UserRole.ADMIN: set(Permission),
}


def has_permission(role: UserRole | str, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(role, set())


def is_admin(role: UserRole | str) -> bool:
    return role == UserRole.ADMIN


def is_authorized(
    actor_id: UUID,
    actor_role: UserRole | str,
    owner_id: UUID | None = None,
    required_role: UserRole | None = None,
) -> bool:
    """Decide whether an actor may act on a resource.

    Admins are always allowed. Otherwise the actor must hold
    ``required_role`` when one is given, and must be the resource owner
    when ``owner_id`` is given.

    Args:
        actor_id: Identity of the caller
        actor_role: Role of the caller
        owner_id: Owner of the resource, if ownership matters
        required_role: Role the operation demands, if any

    Returns:
        True if the action is allowed
    """
    if is_admin(actor_role):
        return True
    if required_role is not None and actor_role != required_role.value:
        return False
    if owner_id is not None and owner_id != actor_id:
        return False
    return True
