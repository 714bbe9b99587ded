"""Seat accounting for trips.

Pending and confirmed bookings hold seats; cancelled and completed ones do
not. A trip without ``max_participants`` has unlimited capacity.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CapacityExceeded
from app.domain.booking_state import SEAT_HOLDING_STATUSES
from app.models.booking import Booking
from app.models.trip import Trip

logger = logging.getLogger(__name__)


async def committed_seats(db: AsyncSession, trip_id: UUID) -> int:
    """Sum of people across the trip's seat-holding bookings."""
    total = await db.scalar(
        select(func.coalesce(func.sum(Booking.number_of_people), 0)).where(
            Booking.trip_id == trip_id,
            Booking.status.in_([s.value for s in SEAT_HOLDING_STATUSES]),
        )
    )
    return int(total or 0)


def available_seats(trip: Trip, committed: int) -> int | None:
    """Seats left on a trip, or None when capacity is unlimited."""
    if trip.max_participants is None:
        return None
    return max(trip.max_participants - committed, 0)


def check_admission(trip: Trip, committed: int, requested: int) -> None:
    """Reject a party that would push the trip over its limit.

    Raises:
        CapacityExceeded: committed + requested > max_participants
    """
    if trip.max_participants is None:
        return
    if committed + requested > trip.max_participants:
        logger.info(
            "Admission rejected for trip %s: committed=%d requested=%d limit=%d",
            trip.id,
            committed,
            requested,
            trip.max_participants,
        )
        raise CapacityExceeded(available=available_seats(trip, committed))
