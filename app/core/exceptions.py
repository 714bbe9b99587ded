"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "internal_error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
        code: str | None = None,
    ) -> None:
        if code:
            self.code = code
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "not_authenticated"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "forbidden"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class TripNotFound(NotFoundError):
    """Trip does not exist."""

    code = "trip_not_found"

    def __init__(self, trip_id: str | None = None) -> None:
        super().__init__("Trip", trip_id)


class TripInactive(AppException):
    """Trip exists but is closed for new bookings."""

    code = "trip_inactive"

    def __init__(self, detail: str = "Trip is not available for booking") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class CapacityExceeded(AppException):
    """Requested party does not fit in the trip's remaining seats."""

    code = "capacity_exceeded"

    def __init__(self, available: int | None = None) -> None:
        detail = "Not enough spaces available for this trip"
        if available is not None:
            detail = f"{detail} ({available} remaining)"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BookingNotFound(NotFoundError):
    """Booking does not exist or is not visible to the caller."""

    code = "booking_not_found"

    def __init__(self, identifier: str | None = None) -> None:
        super().__init__("Booking", identifier)


class InvalidTransition(AppException):
    """Booking status change is not allowed from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid booking transition: {current} → {target}",
        )


class AlreadyCancelled(AppException):
    """Booking has already been cancelled."""

    code = "already_cancelled"

    def __init__(self, detail: str = "Booking is already cancelled") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BookingNotDeletable(AppException):
    """Only pending or cancelled bookings may be deleted."""

    code = "booking_not_deletable"

    def __init__(self, current: str) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Bookings in status '{current}' cannot be deleted",
        )


class ReferenceGenerationFailed(AppException):
    """No unique booking reference could be assigned."""

    code = "reference_generation_failed"

    def __init__(self, attempts: int) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Could not assign a unique booking reference after {attempts} attempts",
        )
