"""Booking-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.domain.booking_state import BookingStatus
from app.schemas.trip import TripSummary
from app.schemas.user import validate_phone_number


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    trip_id: UUID
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., max_length=20)
    number_of_people: int = Field(..., ge=1)
    special_requests: str | None = Field(None, max_length=1000)

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Customer name is required")
        return v

    @field_validator("customer_phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_number(v)


class BookingStatusUpdate(BaseModel):
    """Schema for an administrator changing a booking's status."""

    status: BookingStatus
    admin_notes: str | None = Field(None, max_length=1000)


class BookingCancelRequest(BaseModel):
    """Schema for an owner cancelling a booking."""

    reason: str | None = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_reference: str
    trip_id: UUID
    user_id: UUID | None

    customer_name: str
    customer_email: str
    customer_phone: str

    number_of_people: int
    total_price: Decimal
    status: BookingStatus

    special_requests: str | None
    admin_notes: str | None

    booking_date: datetime
    created_at: datetime
    updated_at: datetime


class BookingDetailResponse(BookingResponse):
    """Booking with the trip it belongs to."""

    trip: TripSummary


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int


class BookingStatistics(BaseModel):
    """Counts and revenue across all bookings."""

    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    completed_bookings: int
    total_revenue: Decimal
    pending_revenue: Decimal
    confirmed_revenue: Decimal
    average_booking_value: Decimal


class RevenueStatistics(BaseModel):
    """Month-over-month revenue of confirmed and completed bookings."""

    this_month: Decimal
    last_month: Decimal
    growth_percentage: Decimal
