"""Trip catalog Pydantic schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TripResponse(BaseModel):
    """Trip pricing and capacity as seen by customers."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None
    location: str
    duration_days: int
    price: Decimal
    discount_price: Decimal | None
    unit_price: Decimal
    max_participants: int | None
    is_active: bool
    is_featured: bool


class TripSummary(BaseModel):
    """Compact trip info embedded in booking details."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    location: str
    unit_price: Decimal


class TripAvailabilityResponse(BaseModel):
    """Seats held against a trip and what is left."""

    trip_id: UUID
    is_active: bool
    max_participants: int | None
    committed_seats: int
    available_seats: int | None  # None = unlimited
    unit_price: Decimal
