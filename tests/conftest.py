import os

# Settings are read once at import time
os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

from datetime import datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from app.core.locks import TripLockRegistry  # noqa: E402
from app.core.security import create_tokens, get_password_hash  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.domain.booking_state import BookingStatus  # noqa: E402
from app.domain.pricing import calculate_total_price  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Booking, Trip, User  # noqa: E402
from app.schemas.booking import BookingCreate  # noqa: E402
from app.services.booking_service import BookingService  # noqa: E402

PASSWORD = "Secret123"


@pytest.fixture
async def engine(tmp_path):
    """A fresh SQLite database file per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'bookings.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def service():
    """BookingService with its own lock registry."""
    return BookingService(locks=TripLockRegistry())


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db):
    """User factory (Factories as fixtures)."""
    counter = {"n": 0}

    async def _factory(
        role: str = "customer",
        email: str | None = None,
        name: str = "Test User",
        is_active: bool = True,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            name=name,
            password_hash=get_password_hash(PASSWORD),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        await db.commit()
        return user

    return _factory


@pytest.fixture
def create_trip(db):
    """Trip factory (Factories as fixtures)."""

    async def _factory(
        price: Decimal = Decimal("100.00"),
        discount_price: Decimal | None = None,
        max_participants: int | None = None,
        is_active: bool = True,
        title: str = "Desert Safari",
        location: str = "Dubai",
    ) -> Trip:
        trip = Trip(
            title=title,
            location=location,
            duration_days=1,
            price=price,
            discount_price=discount_price,
            max_participants=max_participants,
            is_active=is_active,
        )
        db.add(trip)
        await db.commit()
        return trip

    return _factory


@pytest.fixture
def create_booking(db):
    """Booking factory writing straight to the ledger, bypassing admission."""
    counter = {"n": 0}

    async def _factory(
        trip: Trip,
        user: User | None = None,
        status: BookingStatus = BookingStatus.PENDING,
        number_of_people: int = 1,
        customer_email: str = "guest@example.com",
        customer_name: str = "Guest Customer",
        created_at: datetime | None = None,
    ) -> Booking:
        counter["n"] += 1
        booking = Booking(
            booking_reference=f"BKTEST{counter['n']:06d}",
            trip_id=trip.id,
            user_id=user.id if user else None,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone="+1 555 0100",
            number_of_people=number_of_people,
            total_price=calculate_total_price(
                trip.price, trip.discount_price, number_of_people
            ),
            status=BookingStatus(status).value,
        )
        if created_at is not None:
            booking.created_at = created_at
        db.add(booking)
        await db.commit()
        return booking

    return _factory


@pytest.fixture
def booking_request():
    """BookingCreate builder."""

    def _factory(trip: Trip, number_of_people: int = 1, **overrides) -> BookingCreate:
        data = {
            "trip_id": trip.id,
            "customer_name": "Jane Traveller",
            "customer_email": "jane@example.com",
            "customer_phone": "+1 555 0100",
            "number_of_people": number_of_people,
        }
        data.update(overrides)
        return BookingCreate(**data)

    return _factory


@pytest.fixture
def user_password():
    return PASSWORD


@pytest.fixture
def auth_headers():
    def _factory(user: User) -> dict[str, str]:
        tokens = create_tokens(str(user.id), user.email, user.role)
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    return _factory
