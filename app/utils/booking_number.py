"""Booking reference generation."""

import random
from datetime import UTC, datetime

from app.config import settings

_random = random.SystemRandom()


def generate_booking_reference(
    prefix: str | None = None,
    now: datetime | None = None,
) -> str:
    """Generate a candidate booking reference.

    Format is prefix + UTC timestamp to the second + 4 random digits,
    e.g. 'BK202510191830151234'. Candidates are not checked against
    existing bookings here; the unique index on
    ``bookings.booking_reference`` rejects duplicates and the booking
    service retries with a fresh candidate.

    Args:
        prefix: Reference prefix, defaults to the configured one
        now: Creation time, defaults to the current UTC time

    Returns:
        str: Booking reference candidate
    """
    prefix = settings.booking_reference_prefix if prefix is None else prefix
    timestamp = (now or datetime.now(UTC)).strftime("%Y%m%d%H%M%S")
    suffix = _random.randint(1000, 9999)
    return f"{prefix}{timestamp}{suffix}"
