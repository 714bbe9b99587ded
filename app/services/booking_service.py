"""Booking admission, lookup and lifecycle.

Admission (capacity check, pricing, reference assignment and insert) runs
under the trip's lock and is committed before the lock is released, so a
booking admitted by one request is visible to the next request's capacity
check.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.core.exceptions import (
    AuthorizationError,
    BookingNotDeletable,
    BookingNotFound,
    ReferenceGenerationFailed,
)
from app.core.locks import TripLockRegistry, trip_locks
from app.core.permissions import is_admin, owns
from app.domain.booking_state import (
    REVENUE_STATUSES,
    BookingActor,
    BookingStatus,
    assert_booking_transition,
    can_delete,
)
from app.domain.pricing import calculate_total_price, to_money
from app.models.base import utcnow
from app.models.booking import Booking
from app.models.trip import Trip
from app.models.user import User
from app.schemas.booking import BookingCreate
from app.services.capacity_service import check_admission, committed_seats
from app.services.notification_service import NotificationService, notification_service
from app.services.trip_service import get_bookable_trip
from app.utils.booking_number import generate_booking_reference

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "reference": Booking.booking_reference,
    "customer": Booking.customer_name,
    "status": Booking.status,
    "booking_date": Booking.booking_date,
    "total_price": Booking.total_price,
}


def _is_reference_collision(exc: IntegrityError) -> bool:
    return "booking_reference" in str(exc.orig)


def _month_start(year: int, month: int, tzinfo) -> datetime:
    return datetime(year, month, 1, tzinfo=tzinfo)


class BookingService:
    """Service for booking admission and lifecycle operations."""

    def __init__(
        self,
        locks: TripLockRegistry | None = None,
        notifier: NotificationService | None = None,
        reference_factory: Callable[[], str] | None = None,
        max_reference_attempts: int | None = None,
    ) -> None:
        self.locks = locks or trip_locks
        self.notifier = notifier or notification_service
        self.reference_factory = reference_factory or generate_booking_reference
        self.max_reference_attempts = (
            max_reference_attempts or settings.booking_reference_max_attempts
        )

    # ==================== ADMISSION ====================

    async def create_booking(
        self,
        db: AsyncSession,
        data: BookingCreate,
        user_id: UUID | None = None,
    ) -> Booking:
        """Admit a new booking for a trip.

        The committed-seat check and the insert run as one unit per trip.
        A reference collision rolls the attempt back and retries with a
        fresh reference.

        Args:
            db: Database session (its transaction is committed here)
            data: Booking request
            user_id: Owning user, None for guest bookings

        Returns:
            Booking: The committed booking, status pending

        Raises:
            TripNotFound: Trip does not exist
            TripInactive: Trip is closed for bookings
            CapacityExceeded: Party does not fit
            ReferenceGenerationFailed: Retry budget exhausted
        """
        for attempt in range(1, self.max_reference_attempts + 1):
            async with self.locks.hold(data.trip_id):
                try:
                    booking = await self._admit(db, data, user_id)
                    await db.commit()
                except IntegrityError as exc:
                    await db.rollback()
                    if not _is_reference_collision(exc):
                        raise
                    logger.warning(
                        "Booking reference collision on attempt %d/%d for trip %s",
                        attempt,
                        self.max_reference_attempts,
                        data.trip_id,
                    )
                    continue
                except Exception:
                    # Release the trip row lock before the lock is handed on
                    await db.rollback()
                    raise

            logger.info(
                "Booking %s created for trip %s (%d people, total %s)",
                booking.booking_reference,
                booking.trip_id,
                booking.number_of_people,
                booking.total_price,
            )
            return booking

        logger.error(
            "Gave up assigning a booking reference for trip %s after %d attempts",
            data.trip_id,
            self.max_reference_attempts,
        )
        raise ReferenceGenerationFailed(self.max_reference_attempts)

    async def _admit(
        self,
        db: AsyncSession,
        data: BookingCreate,
        user_id: UUID | None,
    ) -> Booking:
        trip = await get_bookable_trip(db, data.trip_id, for_update=True)

        if trip.max_participants is not None:
            committed = await committed_seats(db, trip.id)
            check_admission(trip, committed, data.number_of_people)

        booking = Booking(
            booking_reference=self.reference_factory(),
            trip_id=trip.id,
            user_id=user_id,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            number_of_people=data.number_of_people,
            total_price=calculate_total_price(
                trip.price, trip.discount_price, data.number_of_people
            ),
            status=BookingStatus.PENDING.value,
            special_requests=data.special_requests,
        )
        db.add(booking)
        await db.flush()
        return booking

    # ==================== LOOKUP ====================

    async def _get(
        self,
        db: AsyncSession,
        booking_id: UUID,
        *,
        for_update: bool = False,
        with_trip: bool = False,
    ) -> Booking:
        query = select(Booking).where(Booking.id == booking_id)
        if with_trip:
            query = query.options(selectinload(Booking.trip))
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        booking = result.scalar_one_or_none()
        if not booking:
            raise BookingNotFound(str(booking_id))
        return booking

    async def get_booking_for_caller(
        self,
        db: AsyncSession,
        booking_id: UUID,
        caller: User,
    ) -> Booking:
        """Fetch a booking with its trip; admins see all, others only their own."""
        booking = await self._get(db, booking_id, with_trip=True)
        if not (is_admin(caller) or owns(caller, booking.user_id)):
            raise AuthorizationError("You can only view your own bookings")
        return booking

    async def get_booking_by_reference(
        self,
        db: AsyncSession,
        reference: str,
        caller: User | None = None,
        email: str | None = None,
    ) -> Booking:
        """Fetch a booking by its reference.

        Admins and the owner see it directly; anyone else must present the
        customer email recorded on the booking. A mismatch is reported as
        not found so references cannot be probed.
        """
        result = await db.execute(
            select(Booking)
            .options(selectinload(Booking.trip))
            .where(Booking.booking_reference == reference.strip())
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise BookingNotFound(reference)

        if is_admin(caller) or owns(caller, booking.user_id):
            return booking
        if email and email.strip().lower() == booking.customer_email.lower():
            return booking
        raise BookingNotFound(reference)

    async def list_bookings(
        self,
        db: AsyncSession,
        search: str | None = None,
        status: BookingStatus | None = None,
        trip_id: UUID | None = None,
        user_id: UUID | None = None,
        sort_by: str | None = None,
        sort_desc: bool = False,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Booking], int]:
        """Filtered, sorted page of all bookings (admin view)."""
        query = select(Booking).join(Trip, Booking.trip_id == Trip.id)

        if search:
            term = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Booking.booking_reference.ilike(term),
                    Booking.customer_name.ilike(term),
                    Booking.customer_email.ilike(term),
                    Booking.customer_phone.ilike(term),
                    Trip.title.ilike(term),
                )
            )
        if status:
            query = query.where(Booking.status == BookingStatus(status).value)
        if trip_id:
            query = query.where(Booking.trip_id == trip_id)
        if user_id:
            query = query.where(Booking.user_id == user_id)

        total = await db.scalar(select(func.count()).select_from(query.subquery()))

        column = SORT_COLUMNS.get((sort_by or "").lower())
        if column is None:
            query = query.order_by(Booking.created_at.desc())
        else:
            query = query.order_by(column.desc() if sort_desc else column.asc())

        query = query.offset((page - 1) * page_size).limit(page_size)
        result = await db.execute(query)
        return list(result.scalars().all()), total or 0

    async def list_user_bookings(
        self,
        db: AsyncSession,
        user_id: UUID,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Booking], int]:
        """The caller's own bookings, newest first."""
        query = (
            select(Booking)
            .join(Trip, Booking.trip_id == Trip.id)
            .where(Booking.user_id == user_id)
        )
        if search:
            term = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Booking.booking_reference.ilike(term),
                    Trip.title.ilike(term),
                    Booking.status.ilike(term),
                )
            )

        total = await db.scalar(select(func.count()).select_from(query.subquery()))
        query = (
            query.order_by(Booking.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total or 0

    async def recent_bookings(self, db: AsyncSession, count: int = 10) -> list[Booking]:
        result = await db.execute(
            select(Booking).order_by(Booking.created_at.desc()).limit(count)
        )
        return list(result.scalars().all())

    # ==================== LIFECYCLE ====================

    async def change_status(
        self,
        db: AsyncSession,
        booking_id: UUID,
        target: BookingStatus,
        admin_notes: str | None = None,
    ) -> Booking:
        """Administrator status change (confirm, complete or cancel).

        The booking is left untouched when the transition is rejected.
        """
        booking = await self._get(db, booking_id, for_update=True)
        previous = booking.status
        new_status = assert_booking_transition(previous, target, BookingActor.ADMIN)

        booking.status = new_status.value
        if admin_notes is not None:
            booking.admin_notes = admin_notes
        booking.updated_at = utcnow()
        await self.notifier.booking_status_changed(db, booking, previous)
        await db.commit()

        logger.info(
            "Booking %s moved %s -> %s by admin",
            booking.booking_reference,
            previous,
            booking.status,
        )
        return booking

    async def cancel_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        caller: User,
        reason: str | None = None,
    ) -> Booking:
        """Cancel a booking on behalf of its owner (or an administrator).

        Raises:
            BookingNotFound: No such booking
            AuthorizationError: Caller is neither owner nor admin
            AlreadyCancelled: Booking is already cancelled
            InvalidTransition: Booking is completed
        """
        booking = await self._get(db, booking_id, for_update=True)
        if owns(caller, booking.user_id):
            actor = BookingActor.OWNER
        elif is_admin(caller):
            actor = BookingActor.ADMIN
        else:
            raise AuthorizationError("You can only cancel your own bookings")

        previous = booking.status
        new_status = assert_booking_transition(previous, BookingStatus.CANCELLED, actor)

        booking.status = new_status.value
        booking.updated_at = utcnow()
        await self.notifier.booking_status_changed(db, booking, previous)
        await db.commit()

        logger.info(
            "Booking %s cancelled by %s (was %s): %s",
            booking.booking_reference,
            actor.value,
            previous,
            reason or "no reason given",
        )
        return booking

    async def delete_booking(self, db: AsyncSession, booking_id: UUID) -> None:
        """Remove a pending or cancelled booking."""
        booking = await self._get(db, booking_id, for_update=True)
        if not can_delete(booking.status):
            raise BookingNotDeletable(booking.status)

        reference = booking.booking_reference
        await db.delete(booking)
        await db.commit()
        logger.info("Booking %s deleted", reference)

    # ==================== STATISTICS ====================

    async def get_statistics(self, db: AsyncSession) -> dict:
        """Counts per status and revenue totals."""
        result = await db.execute(
            select(
                Booking.status,
                func.count(Booking.id),
                func.coalesce(func.sum(Booking.total_price), 0),
            ).group_by(Booking.status)
        )
        counts = {status.value: 0 for status in BookingStatus}
        amounts = {status.value: Decimal("0") for status in BookingStatus}
        for status, count, amount in result.all():
            counts[status] = count
            amounts[status] = Decimal(str(amount))

        revenue_statuses = [s.value for s in REVENUE_STATUSES]
        total_revenue = sum((amounts[s] for s in revenue_statuses), Decimal("0"))
        revenue_count = sum(counts[s] for s in revenue_statuses)
        average = total_revenue / revenue_count if revenue_count else Decimal("0")

        return {
            "total_bookings": sum(counts.values()),
            "pending_bookings": counts[BookingStatus.PENDING.value],
            "confirmed_bookings": counts[BookingStatus.CONFIRMED.value],
            "cancelled_bookings": counts[BookingStatus.CANCELLED.value],
            "completed_bookings": counts[BookingStatus.COMPLETED.value],
            "total_revenue": to_money(total_revenue),
            "pending_revenue": to_money(amounts[BookingStatus.PENDING.value]),
            "confirmed_revenue": to_money(amounts[BookingStatus.CONFIRMED.value]),
            "average_booking_value": to_money(average),
        }

    async def _revenue_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> Decimal:
        amount = await db.scalar(
            select(func.coalesce(func.sum(Booking.total_price), 0)).where(
                Booking.status.in_([s.value for s in REVENUE_STATUSES]),
                Booking.created_at >= start,
                Booking.created_at < end,
            )
        )
        return to_money(Decimal(str(amount or 0)))

    async def get_revenue_statistics(
        self, db: AsyncSession, now: datetime | None = None
    ) -> dict:
        """This month's revenue against last month's."""
        now = now or utcnow()
        this_start = _month_start(now.year, now.month, now.tzinfo)
        if now.month == 12:
            next_start = _month_start(now.year + 1, 1, now.tzinfo)
        else:
            next_start = _month_start(now.year, now.month + 1, now.tzinfo)
        if now.month == 1:
            last_start = _month_start(now.year - 1, 12, now.tzinfo)
        else:
            last_start = _month_start(now.year, now.month - 1, now.tzinfo)

        this_month = await self._revenue_between(db, this_start, next_start)
        last_month = await self._revenue_between(db, last_start, this_start)

        growth = Decimal("0")
        if last_month > 0:
            growth = (this_month - last_month) / last_month * 100

        return {
            "this_month": this_month,
            "last_month": last_month,
            "growth_percentage": to_money(growth),
        }


# Singleton instance
booking_service = BookingService()
