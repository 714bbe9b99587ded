from decimal import Decimal

import pytest

from app.domain.booking_state import BookingStatus

BOOKINGS = "/api/v1/bookings"


@pytest.fixture
def booking_payload():
    def _factory(trip, number_of_people: int = 1, **overrides) -> dict:
        payload = {
            "trip_id": str(trip.id),
            "customer_name": "Jane Traveller",
            "customer_email": "jane@example.com",
            "customer_phone": "+1 555 0100",
            "number_of_people": number_of_people,
        }
        payload.update(overrides)
        return payload

    return _factory


class TestCreateBooking:
    async def test_guest_booking(self, client, create_trip, booking_payload):
        trip = await create_trip(price=Decimal("100"), discount_price=Decimal("80"))

        response = await client.post(f"{BOOKINGS}/", json=booking_payload(trip, 2))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert Decimal(body["total_price"]) == Decimal("160.00")
        assert body["user_id"] is None
        assert body["booking_reference"].startswith("BK")

    async def test_signed_in_booking_is_owned(self, client, create_trip, create_user, auth_headers, booking_payload):
        trip = await create_trip()
        user = await create_user()

        response = await client.post(
            f"{BOOKINGS}/", json=booking_payload(trip), headers=auth_headers(user)
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == str(user.id)

    async def test_capacity_exceeded(self, client, create_trip, booking_payload):
        trip = await create_trip(max_participants=3)
        first = await client.post(f"{BOOKINGS}/", json=booking_payload(trip, 2))
        assert first.status_code == 201

        response = await client.post(f"{BOOKINGS}/", json=booking_payload(trip, 2))

        assert response.status_code == 409
        assert response.json()["code"] == "capacity_exceeded"

    async def test_inactive_trip(self, client, create_trip, booking_payload):
        trip = await create_trip(is_active=False)

        response = await client.post(f"{BOOKINGS}/", json=booking_payload(trip))

        assert response.status_code == 400
        assert response.json()["code"] == "trip_inactive"

    async def test_unknown_trip(self, client, booking_payload):
        class Missing:
            id = "00000000-0000-0000-0000-000000000000"

        response = await client.post(f"{BOOKINGS}/", json=booking_payload(Missing))

        assert response.status_code == 404
        assert response.json()["code"] == "trip_not_found"

    async def test_party_must_be_positive(self, client, create_trip, booking_payload):
        trip = await create_trip()

        response = await client.post(f"{BOOKINGS}/", json=booking_payload(trip, 0))

        assert response.status_code == 422


class TestReadBooking:
    async def test_lookup_by_reference_with_email(self, client, create_trip, booking_payload):
        trip = await create_trip(title="Dhow Cruise")
        created = (await client.post(f"{BOOKINGS}/", json=booking_payload(trip, 3))).json()

        response = await client.get(
            f"{BOOKINGS}/reference/{created['booking_reference']}",
            params={"email": "jane@example.com"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["number_of_people"] == 3
        assert body["trip"]["title"] == "Dhow Cruise"

    async def test_lookup_by_reference_without_email(self, client, create_trip, create_booking):
        trip = await create_trip()
        booking = await create_booking(trip)

        response = await client.get(f"{BOOKINGS}/reference/{booking.booking_reference}")

        assert response.status_code == 404
        assert response.json()["code"] == "booking_not_found"

    async def test_owner_reads_detail(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        owner = await create_user()
        booking = await create_booking(trip, user=owner)

        response = await client.get(f"{BOOKINGS}/{booking.id}", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json()["trip"]["id"] == str(trip.id)

    async def test_stranger_is_forbidden(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        owner = await create_user()
        stranger = await create_user()
        booking = await create_booking(trip, user=owner)

        response = await client.get(f"{BOOKINGS}/{booking.id}", headers=auth_headers(stranger))

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    async def test_my_bookings(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        me = await create_user()
        await create_booking(trip, user=me)
        await create_booking(trip)

        response = await client.get(f"{BOOKINGS}/my", headers=auth_headers(me))

        assert response.status_code == 200
        assert response.json()["total"] == 1


class TestCancel:
    async def test_owner_cancels_once(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        owner = await create_user()
        booking = await create_booking(trip, user=owner)

        first = await client.post(
            f"{BOOKINGS}/{booking.id}/cancel",
            json={"reason": "Change of plans"},
            headers=auth_headers(owner),
        )
        second = await client.post(f"{BOOKINGS}/{booking.id}/cancel", headers=auth_headers(owner))

        assert first.status_code == 200
        assert first.json()["status"] == "cancelled"
        assert second.status_code == 409
        assert second.json()["code"] == "already_cancelled"

    async def test_completed_cannot_be_cancelled(
        self, client, create_trip, create_user, create_booking, auth_headers
    ):
        trip = await create_trip()
        owner = await create_user()
        booking = await create_booking(trip, user=owner, status=BookingStatus.COMPLETED)

        response = await client.post(f"{BOOKINGS}/{booking.id}/cancel", headers=auth_headers(owner))

        assert response.status_code == 409
        assert response.json()["code"] == "invalid_transition"


class TestAdmin:
    async def test_customer_cannot_change_status(
        self, client, create_trip, create_user, create_booking, auth_headers
    ):
        trip = await create_trip()
        owner = await create_user()
        booking = await create_booking(trip, user=owner)

        response = await client.patch(
            f"{BOOKINGS}/{booking.id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 403

    async def test_confirm_then_complete(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        admin = await create_user(role="admin")
        booking = await create_booking(trip)
        headers = auth_headers(admin)

        confirmed = await client.patch(
            f"{BOOKINGS}/{booking.id}/status",
            json={"status": "confirmed", "admin_notes": "Paid in cash"},
            headers=headers,
        )
        completed = await client.patch(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "completed"}, headers=headers
        )
        reopened = await client.patch(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "pending"}, headers=headers
        )

        assert confirmed.status_code == 200
        assert confirmed.json()["admin_notes"] == "Paid in cash"
        assert completed.json()["status"] == "completed"
        assert reopened.status_code == 409
        assert reopened.json()["code"] == "invalid_transition"

    async def test_delete_policy(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        admin = await create_user(role="admin")
        pending = await create_booking(trip)
        confirmed = await create_booking(trip, status=BookingStatus.CONFIRMED)
        headers = auth_headers(admin)

        refused = await client.delete(f"{BOOKINGS}/{confirmed.id}", headers=headers)
        deleted = await client.delete(f"{BOOKINGS}/{pending.id}", headers=headers)
        gone = await client.get(f"{BOOKINGS}/{pending.id}", headers=headers)

        assert refused.status_code == 409
        assert refused.json()["code"] == "booking_not_deletable"
        assert deleted.status_code == 204
        assert gone.status_code == 404

    async def test_list_and_statistics(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip(price=Decimal("50"))
        admin = await create_user(role="admin")
        await create_booking(trip, customer_name="Alice", status=BookingStatus.CONFIRMED, number_of_people=2)
        await create_booking(trip, customer_name="Bob")
        headers = auth_headers(admin)

        listing = await client.get(
            f"{BOOKINGS}/", params={"search": "alice"}, headers=headers
        )
        stats = await client.get(f"{BOOKINGS}/statistics", headers=headers)
        revenue = await client.get(f"{BOOKINGS}/statistics/revenue", headers=headers)
        recent = await client.get(f"{BOOKINGS}/recent", params={"count": 1}, headers=headers)

        assert listing.status_code == 200
        assert [b["customer_name"] for b in listing.json()["bookings"]] == ["Alice"]
        assert stats.json()["total_bookings"] == 2
        assert Decimal(stats.json()["total_revenue"]) == Decimal("100.00")
        assert revenue.status_code == 200
        assert Decimal(revenue.json()["this_month"]) == Decimal("100.00")
        assert len(recent.json()) == 1

    async def test_list_requires_admin(self, client, create_user, auth_headers):
        customer = await create_user()

        response = await client.get(f"{BOOKINGS}/", headers=auth_headers(customer))

        assert response.status_code == 403

    async def test_bad_sort_key(self, client, create_user, auth_headers):
        admin = await create_user(role="admin")

        response = await client.get(
            f"{BOOKINGS}/", params={"sort_by": "password"}, headers=auth_headers(admin)
        )

        assert response.status_code == 422
