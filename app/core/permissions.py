"""Role-based access control."""

from enum import Enum
from uuid import UUID

from app.models.user import User


class UserRole(str, Enum):
    """User roles in the system."""

    CUSTOMER = "customer"
    ADMIN = "admin"


def is_admin(user: User | None) -> bool:
    """Check whether a (possibly anonymous) caller is an administrator."""
    return user is not None and user.role == UserRole.ADMIN.value


def owns(user: User | None, owner_id: UUID | None) -> bool:
    """Check whether the caller is the recorded owner of a resource."""
    return user is not None and owner_id is not None and user.id == owner_id
