"""Trip catalog endpoints (read-only)."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.schemas.trip import TripAvailabilityResponse, TripResponse
from app.services.capacity_service import available_seats, committed_seats
from app.services.trip_service import get_trip, list_active_trips

router = APIRouter()


@router.get("/", response_model=list[TripResponse])
async def list_trips(
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> list[TripResponse]:
    """List trips open for booking."""
    trips, _ = await list_active_trips(db, page=page, page_size=page_size)
    return [TripResponse.model_validate(t) for t in trips]


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip_detail(
    trip_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TripResponse:
    """Get a trip's pricing and capacity."""
    trip = await get_trip(db, trip_id)
    return TripResponse.model_validate(trip)


@router.get("/{trip_id}/availability", response_model=TripAvailabilityResponse)
async def get_trip_availability(
    trip_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TripAvailabilityResponse:
    """Seats currently held against a trip and how many remain."""
    trip = await get_trip(db, trip_id)
    committed = await committed_seats(db, trip.id)
    return TripAvailabilityResponse(
        trip_id=trip.id,
        is_active=trip.is_active,
        max_participants=trip.max_participants,
        committed_seats=committed,
        available_seats=available_seats(trip, committed),
        unit_price=trip.unit_price,
    )
