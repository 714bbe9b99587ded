"""Database models."""

from app.models.booking import Booking
from app.models.notification import Notification
from app.models.trip import Trip
from app.models.user import User

__all__ = [
    # User
    "User",
    # Catalog
    "Trip",
    # Booking
    "Booking",
    # Notifications
    "Notification",
]
