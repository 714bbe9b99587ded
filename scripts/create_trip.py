#!/usr/bin/env python3
"""Add a trip to the catalog."""

import asyncio
from decimal import Decimal

from app.database import get_db_context
from app.models.trip import Trip


async def create_trip(
    title: str,
    location: str,
    price: Decimal,
    discount_price: Decimal | None = None,
    max_participants: int | None = None,
    duration_days: int = 1,
    description: str | None = None,
    featured: bool = False,
) -> Trip:
    """Insert an active trip and return it."""
    if discount_price is not None and discount_price > price:
        raise SystemExit("Discount price cannot exceed the list price")

    async with get_db_context() as session:
        trip = Trip(
            title=title,
            location=location,
            description=description,
            duration_days=duration_days,
            price=price,
            discount_price=discount_price,
            max_participants=max_participants,
            is_active=True,
            is_featured=featured,
        )
        session.add(trip)

    capacity = max_participants if max_participants is not None else "unlimited"
    print(f"Created trip {trip.id}: {title} ({location})")
    print(f"Price: {trip.unit_price} per person, capacity: {capacity}")
    return trip


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create a trip")
    parser.add_argument("--title", required=True, help="Trip title")
    parser.add_argument("--location", required=True, help="Destination")
    parser.add_argument("--price", required=True, type=Decimal, help="Price per person")
    parser.add_argument("--discount-price", type=Decimal, help="Discounted price per person")
    parser.add_argument("--max-participants", type=int, help="Seat limit (omit for unlimited)")
    parser.add_argument("--duration-days", type=int, default=1, help="Length in days")
    parser.add_argument("--description", help="Long description")
    parser.add_argument("--featured", action="store_true", help="Feature the trip")

    args = parser.parse_args()

    asyncio.run(
        create_trip(
            title=args.title,
            location=args.location,
            price=args.price,
            discount_price=args.discount_price,
            max_participants=args.max_participants,
            duration_days=args.duration_days,
            description=args.description,
            featured=args.featured,
        )
    )
