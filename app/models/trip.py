"""Trip catalog model (read-only to the booking workflow)."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.domain.pricing import unit_price
from app.models.base import TimestampMixin

if TYPE_CHECKING:
    from app.models.booking import Booking


class Trip(TimestampMixin, Base):
    """A bookable tour."""

    __tablename__ = "trips"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_trips_price_positive"),
        CheckConstraint(
            "discount_price IS NULL OR discount_price <= price",
            name="ck_trips_discount_not_above_price",
        ),
        CheckConstraint(
            "max_participants IS NULL OR max_participants > 0",
            name="ck_trips_max_participants_positive",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, default=1)

    # Pricing (per person)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))

    # NULL = unlimited
    max_participants: Mapped[int | None] = mapped_column(Integer)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="trip")

    @property
    def unit_price(self) -> Decimal:
        """Price charged per person for new bookings."""
        return unit_price(self.price, self.discount_price)
