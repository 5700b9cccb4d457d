"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from hallbook.api.v1 import auth, bookings, halls

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Halls
api_router.include_router(halls.router, prefix="/halls", tags=["Halls"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
