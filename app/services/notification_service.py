"""Notification Service for booking events.

Every booking status change is announced here: it is written to the log
and, when the booking belongs to a registered user, stored as an in-app
notification the user can list and mark as read.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.booking import Booking
from app.models.notification import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for in-app booking notifications."""

    # Notification types
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    BOOKING_STATUS_CHANGED = "booking_status_changed"

    _TYPES_BY_STATUS = {
        "confirmed": BOOKING_CONFIRMED,
        "cancelled": BOOKING_CANCELLED,
        "completed": BOOKING_COMPLETED,
    }

    _TITLES_BY_STATUS = {
        "confirmed": "Booking Confirmed!",
        "cancelled": "Booking Cancelled",
        "completed": "Booking Completed",
    }

    # ==================== IN-APP NOTIFICATIONS ====================

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        title: str,
        body: str,
        notification_type: str,
        booking_id: UUID | None = None,
    ) -> Notification:
        """Create an in-app notification.

        Args:
            db: Database session
            user_id: User to notify
            title: Notification title
            body: Notification body text
            notification_type: Type of notification
            booking_id: Related booking ID

        Returns:
            Notification: Created notification
        """
        notification = Notification(
            user_id=user_id,
            title=title,
            body=body,
            notification_type=notification_type,
            booking_id=booking_id,
        )
        db.add(notification)
        await db.flush()
        return notification

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Notification], int, int]:
        """Page through a user's notifications, newest first.

        Returns:
            tuple: (notifications, total, unread_count)
        """
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))

        total = await db.scalar(select(func.count()).select_from(query.subquery()))
        unread_count = await db.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )

        query = (
            query.order_by(Notification.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total or 0, unread_count or 0

    async def mark_read(
        self, db: AsyncSession, user_id: UUID, notification_id: UUID
    ) -> Notification:
        """Mark one of the user's notifications as read."""
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification", str(notification_id))

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            await db.flush()
        return notification

    async def mark_all_read(self, db: AsyncSession, user_id: UUID) -> int:
        """Mark every unread notification of the user as read.

        Returns:
            int: Number of notifications updated
        """
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True, read_at=utcnow())
        )
        return result.rowcount or 0

    # ==================== BOOKING EVENTS ====================

    async def booking_status_changed(
        self,
        db: AsyncSession,
        booking: Booking,
        previous_status: str,
    ) -> Notification | None:
        """Announce a booking status change.

        Guest bookings (no owning user) are only logged.
        """
        logger.info(
            "Booking %s status changed: %s -> %s",
            booking.booking_reference,
            previous_status,
            booking.status,
        )
        if booking.user_id is None:
            return None

        title = self._TITLES_BY_STATUS.get(booking.status, "Booking Updated")
        return await self.create_notification(
            db=db,
            user_id=booking.user_id,
            title=title,
            body=(
                f"Your booking {booking.booking_reference} is now {booking.status} "
                f"(was {previous_status})."
            ),
            notification_type=self._TYPES_BY_STATUS.get(
                booking.status, self.BOOKING_STATUS_CHANGED
            ),
            booking_id=booking.id,
        )


# Singleton instance
notification_service = NotificationService()
