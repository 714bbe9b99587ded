"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCancelRequest,
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatistics,
    BookingStatusUpdate,
    RevenueStatistics,
)
from app.schemas.notification import NotificationListResponse, NotificationResponse
from app.schemas.trip import TripAvailabilityResponse, TripResponse, TripSummary
from app.schemas.user import (
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "RefreshTokenRequest",
    # Trip
    "TripResponse",
    "TripSummary",
    "TripAvailabilityResponse",
    # Booking
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingCancelRequest",
    "BookingResponse",
    "BookingDetailResponse",
    "BookingListResponse",
    "BookingStatistics",
    "RevenueStatistics",
    # Notification
    "NotificationResponse",
    "NotificationListResponse",
]
