import pytest

from app.core.exceptions import CapacityExceeded
from app.domain.booking_state import BookingStatus
from app.services.capacity_service import available_seats, check_admission, committed_seats


class TestCommittedSeats:
    async def test_counts_pending_and_confirmed_only(self, db, create_trip, create_booking):
        trip = await create_trip(max_participants=20)
        await create_booking(trip, status=BookingStatus.PENDING, number_of_people=2)
        await create_booking(trip, status=BookingStatus.CONFIRMED, number_of_people=3)
        await create_booking(trip, status=BookingStatus.CANCELLED, number_of_people=4)
        await create_booking(trip, status=BookingStatus.COMPLETED, number_of_people=5)

        assert await committed_seats(db, trip.id) == 5

    async def test_empty_trip(self, db, create_trip):
        trip = await create_trip(max_participants=5)
        assert await committed_seats(db, trip.id) == 0

    async def test_other_trips_are_ignored(self, db, create_trip, create_booking):
        trip = await create_trip(max_participants=5)
        other = await create_trip(max_participants=5, title="Other")
        await create_booking(other, number_of_people=3)

        assert await committed_seats(db, trip.id) == 0


class TestCheckAdmission:
    async def test_fits_exactly(self, create_trip):
        trip = await create_trip(max_participants=5)
        check_admission(trip, committed=3, requested=2)

    async def test_one_over(self, create_trip):
        trip = await create_trip(max_participants=5)
        with pytest.raises(CapacityExceeded) as exc_info:
            check_admission(trip, committed=3, requested=3)
        assert "2 remaining" in exc_info.value.detail

    async def test_unlimited_trip_always_admits(self, create_trip):
        trip = await create_trip(max_participants=None)
        check_admission(trip, committed=10_000, requested=500)


async def test_available_seats(create_trip):
    limited = await create_trip(max_participants=4)
    unlimited = await create_trip(max_participants=None, title="Open")

    assert available_seats(limited, 1) == 3
    assert available_seats(limited, 9) == 0
    assert available_seats(unlimited, 9) is None
