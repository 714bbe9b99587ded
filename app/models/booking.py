"""Booking ledger model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base import TimestampMixin, utcnow

if TYPE_CHECKING:
    from app.models.trip import Trip
    from app.models.user import User


class Booking(TimestampMixin, Base):
    """Booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("number_of_people > 0", name="ck_bookings_people_positive"),
        Index("ix_bookings_trip_status", "trip_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_reference: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, index=True
    )  # BKyyyymmddHHMMSSnnnn

    # Customer
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    customer_phone: Mapped[str] = mapped_column(String(20), nullable=False)

    number_of_people: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default="pending", nullable=False, index=True
    )  # pending, confirmed, cancelled, completed

    special_requests: Mapped[str | None] = mapped_column(Text)
    admin_notes: Mapped[str | None] = mapped_column(Text)

    booking_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True
    )  # NULL for guest bookings

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="bookings")
    user: Mapped["User | None"] = relationship("User", back_populates="bookings")
