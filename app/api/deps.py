"""API dependencies for authentication and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.permissions import is_admin
from app.core.security import verify_token
from app.database import get_db
from app.models.user import User

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_current_admin",
    "get_optional_user",
]

# Security scheme (missing credentials are reported as 401 by get_current_user)
security = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> User | None:
    payload = verify_token(token, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    try:
        user_uuid = UUID(user_id)
    except ValueError as e:
        raise AuthenticationError("Invalid token payload") from e

    result = await db.execute(select(User).where(User.id == user_uuid))
    return result.scalar_one_or_none()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if not credentials:
        raise AuthenticationError("Not authenticated")

    user = await _user_from_token(db, credentials.credentials)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user and verify they are active."""
    if not current_user.is_active:
        raise AuthorizationError("User account is deactivated")
    return current_user


async def get_current_admin(
    current_user: Annotated[User, Depends(get_current_active_user)],
) -> User:
    """Get current user and verify they are an admin."""
    if not is_admin(current_user):
        raise AuthorizationError("Admin access required")
    return current_user


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Optionally get the current user if authenticated.

    Guest-friendly endpoints treat a bad or expired token as anonymous.
    """
    if not credentials:
        return None

    try:
        user = await _user_from_token(db, credentials.credentials)
    except AuthenticationError:
        return None
    return user if user and user.is_active else None
