class TestNotifications:
    async def test_status_change_reaches_the_owner(
        self, client, create_trip, create_user, create_booking, auth_headers
    ):
        trip = await create_trip()
        owner = await create_user()
        admin = await create_user(role="admin")
        booking = await create_booking(trip, user=owner)

        await client.patch(
            f"/api/v1/bookings/{booking.id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(admin),
        )
        response = await client.get("/api/v1/notifications/", headers=auth_headers(owner))

        body = response.json()
        assert body["total"] == 1
        assert body["unread_count"] == 1
        assert body["notifications"][0]["booking_id"] == str(booking.id)
        assert body["notifications"][0]["notification_type"] == "booking_confirmed"

    async def test_mark_read(self, client, create_trip, create_user, create_booking, auth_headers):
        trip = await create_trip()
        owner = await create_user()
        booking = await create_booking(trip, user=owner)
        headers = auth_headers(owner)
        await client.post(f"/api/v1/bookings/{booking.id}/cancel", headers=headers)

        listing = (await client.get("/api/v1/notifications/", headers=headers)).json()
        notification_id = listing["notifications"][0]["id"]

        marked = await client.patch(f"/api/v1/notifications/{notification_id}/read", headers=headers)
        after = (await client.get("/api/v1/notifications/", headers=headers)).json()

        assert marked.status_code == 204
        assert after["unread_count"] == 0
        assert after["notifications"][0]["is_read"] is True

    async def test_read_all_and_unread_filter(
        self, client, create_trip, create_user, create_booking, auth_headers
    ):
        trip = await create_trip()
        owner = await create_user()
        admin = await create_user(role="admin")
        first = await create_booking(trip, user=owner)
        second = await create_booking(trip, user=owner)
        for booking in (first, second):
            await client.patch(
                f"/api/v1/bookings/{booking.id}/status",
                json={"status": "confirmed"},
                headers=auth_headers(admin),
            )
        headers = auth_headers(owner)

        marked = await client.post("/api/v1/notifications/read-all", headers=headers)
        unread = (
            await client.get("/api/v1/notifications/", params={"unread_only": True}, headers=headers)
        ).json()

        assert marked.status_code == 204
        assert unread["total"] == 0

    async def test_other_users_notification_is_not_found(
        self, client, create_user, auth_headers
    ):
        user = await create_user()

        response = await client.patch(
            "/api/v1/notifications/00000000-0000-0000-0000-000000000000/read",
            headers=auth_headers(user),
        )

        assert response.status_code == 404
