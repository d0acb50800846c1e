"""Dashboard statistics schemas."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Back-office dashboard figures."""

    total_revenue: int
    total_bookings: int
    total_yachts: int
    confirmed_bookings: int
    pending_bookings: int
    boarded_bookings: int
    cancelled_bookings: int
    occupancy_rate: float
    currency: str
