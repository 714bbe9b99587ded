"""Booking state machine.

States: pending → confirmed | cancelled; confirmed → completed | cancelled.
Cancelled and completed are terminal. Every status change, whether made
by an administrator or by the booking's owner, is validated here.
"""

from enum import Enum

from app.core.exceptions import AlreadyCancelled, AuthorizationError, InvalidTransition


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingActor(str, Enum):
    """Who is asking for a status change."""

    ADMIN = "admin"
    OWNER = "owner"


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

# Owners may only withdraw their booking
OWNER_TARGETS: frozenset[BookingStatus] = frozenset({BookingStatus.CANCELLED})

# Statuses that hold seats against a trip's capacity
SEAT_HOLDING_STATUSES: tuple[BookingStatus, ...] = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
)

REVENUE_STATUSES: tuple[BookingStatus, ...] = (
    BookingStatus.CONFIRMED,
    BookingStatus.COMPLETED,
)

DELETABLE_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CANCELLED}
)


def is_terminal(status: str | BookingStatus) -> bool:
    """Check if no further transition is possible from a status."""
    return not BOOKING_TRANSITIONS[BookingStatus(status)]


def assert_booking_transition(
    current: str | BookingStatus,
    target: str | BookingStatus,
    actor: BookingActor = BookingActor.ADMIN,
) -> BookingStatus:
    """Validate a status change and return the target status.

    Raises:
        AuthorizationError: owner asked for anything but cancellation
        AlreadyCancelled: target is cancelled and the booking already is
        InvalidTransition: target is not reachable from the current status
    """
    current = BookingStatus(current)
    target = BookingStatus(target)

    if actor is BookingActor.OWNER and target not in OWNER_TARGETS:
        raise AuthorizationError("Booking owners can only cancel their bookings")

    if target is BookingStatus.CANCELLED and current is BookingStatus.CANCELLED:
        raise AlreadyCancelled()

    if target not in BOOKING_TRANSITIONS[current]:
        raise InvalidTransition(current.value, target.value)

    return target


def can_delete(status: str | BookingStatus) -> bool:
    """Check whether a booking in this status may be removed."""
    return BookingStatus(status) in DELETABLE_STATUSES
