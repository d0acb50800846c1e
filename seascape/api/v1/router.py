"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from seascape.api.v1 import admin, bookings, checkin, yachts

api_router = APIRouter()

# Catalog
api_router.include_router(yachts.router, prefix="/yachts", tags=["Yachts"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Check-in
api_router.include_router(checkin.router, prefix="/check-in", tags=["Check-in"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
