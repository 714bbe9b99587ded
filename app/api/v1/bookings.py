"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_current_active_user,
    get_current_admin,
    get_db,
    get_optional_user,
)
from app.domain.booking_state import BookingStatus
from app.models.user import User
from app.schemas.booking import (
    BookingCancelRequest,
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatistics,
    BookingStatusUpdate,
    RevenueStatistics,
)
from app.services.booking_service import booking_service

router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Book a trip. Signed-in callers own the booking; guests may book too."""
    user_id = current_user.id if current_user else None
    booking = await booking_service.create_booking(db, booking_data, user_id=user_id)
    return BookingResponse.model_validate(booking)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(default=None, max_length=100),
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    trip_id: UUID | None = Query(default=None),
    user_id: UUID | None = Query(default=None),
    sort_by: str | None = Query(
        default=None, pattern="^(reference|customer|status|booking_date|total_price)$"
    ),
    sort_desc: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """List all bookings (admin only)."""
    bookings, total = await booking_service.list_bookings(
        db,
        search=search,
        status=status_filter,
        trip_id=trip_id,
        user_id=user_id,
        sort_by=sort_by,
        sort_desc=sort_desc,
        page=page,
        page_size=page_size,
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/my", response_model=BookingListResponse)
async def get_my_bookings(
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> BookingListResponse:
    """Get bookings for the current user."""
    bookings, total = await booking_service.list_user_bookings(
        db, current_user.id, search=search, page=page, page_size=page_size
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/recent", response_model=list[BookingResponse])
async def get_recent_bookings(
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    count: int = Query(default=10, ge=1, le=50),
) -> list[BookingResponse]:
    """Newest bookings (admin only)."""
    bookings = await booking_service.recent_bookings(db, count)
    return [BookingResponse.model_validate(b) for b in bookings]


@router.get("/statistics", response_model=BookingStatistics)
async def get_booking_statistics(
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStatistics:
    """Booking counts and revenue (admin only)."""
    return BookingStatistics(**await booking_service.get_statistics(db))


@router.get("/statistics/revenue", response_model=RevenueStatistics)
async def get_revenue_statistics(
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RevenueStatistics:
    """This month's revenue against last month's (admin only)."""
    return RevenueStatistics(**await booking_service.get_revenue_statistics(db))


@router.get("/reference/{reference}", response_model=BookingDetailResponse)
async def get_booking_by_reference(
    reference: str,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    email: EmailStr | None = Query(default=None),
) -> BookingDetailResponse:
    """Look up a booking by reference.

    Guests identify themselves with the email they booked with.
    """
    booking = await booking_service.get_booking_by_reference(
        db, reference, caller=current_user, email=email
    )
    return BookingDetailResponse.model_validate(booking)


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingDetailResponse:
    """Get booking details."""
    booking = await booking_service.get_booking_for_caller(db, booking_id, current_user)
    return BookingDetailResponse.model_validate(booking)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingResponse:
    """Confirm, complete or cancel a booking (admin only)."""
    booking = await booking_service.change_status(
        db, booking_id, request.status, admin_notes=request.admin_notes
    )
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    request: BookingCancelRequest | None = None,
) -> BookingResponse:
    """Cancel a booking (owner or admin)."""
    booking = await booking_service.cancel_booking(
        db, booking_id, current_user, reason=request.reason if request else None
    )
    return BookingResponse.model_validate(booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """Delete a pending or cancelled booking (admin only)."""
    await booking_service.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
