"""Trip catalog lookups used by the booking workflow."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import TripInactive, TripNotFound
from app.models.trip import Trip


async def get_trip(db: AsyncSession, trip_id: UUID, *, for_update: bool = False) -> Trip:
    """Load a trip by id.

    With ``for_update`` the row is locked until the transaction ends, so
    concurrent admissions on other processes queue behind this one.
    Backends without row locks (SQLite) ignore the clause.
    """
    query = select(Trip).where(Trip.id == trip_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    trip = result.scalar_one_or_none()
    if not trip:
        raise TripNotFound(str(trip_id))
    return trip


async def get_bookable_trip(db: AsyncSession, trip_id: UUID, *, for_update: bool = False) -> Trip:
    """Load a trip that is open for new bookings."""
    trip = await get_trip(db, trip_id, for_update=for_update)
    if not trip.is_active:
        raise TripInactive()
    return trip


async def list_active_trips(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Trip], int]:
    """Active trips, featured first then by title."""
    query = select(Trip).where(Trip.is_active.is_(True))
    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    query = (
        query.order_by(Trip.is_featured.desc(), Trip.title)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total or 0
