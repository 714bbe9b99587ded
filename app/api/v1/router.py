"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, bookings, notifications, trips

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Trips
api_router.include_router(trips.router, prefix="/trips", tags=["Trips"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Notifications
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
