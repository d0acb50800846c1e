"""Dashboard statistics (read-only)."""

from seascape.config import settings
from seascape.core.exceptions import AuthorizationError
from seascape.core.session import Session
from seascape.domain.booking_state import BookingStatus, normalize_status
from seascape.ledger.base import BookingLedger, ensure_known_statuses


def compute_stats(bookings: list[dict], total_yachts: int, occupancy_days: int | None = None) -> dict:
    """Summarise bookings for the back-office dashboard.

    Revenue counts every booking that was not cancelled. Occupancy is the
    share of confirmed and boarded bookings over ``total_yachts`` yachts
    bookable for ``occupancy_days`` days, capped at 100.
    """
    days = occupancy_days or settings.occupancy_days
    counts = {s: 0 for s in BookingStatus}
    revenue = 0
    for booking in bookings:
        status = normalize_status(booking["status"])
        counts[status] += 1
        if status != BookingStatus.CANCELLED:
            revenue += booking.get("total_price") or 0

    occupied = counts[BookingStatus.CONFIRMED] + counts[BookingStatus.BOARDED]
    occupancy = 0.0
    if total_yachts > 0:
        occupancy = min(100.0, round(occupied / (total_yachts * days) * 100, 1))

    return {
        "total_revenue": revenue,
        "total_bookings": len(bookings),
        "total_yachts": total_yachts,
        "confirmed_bookings": counts[BookingStatus.CONFIRMED],
        "pending_bookings": counts[BookingStatus.PENDING_PAYMENT],
        "boarded_bookings": counts[BookingStatus.BOARDED],
        "cancelled_bookings": counts[BookingStatus.CANCELLED],
        "occupancy_rate": occupancy,
        "currency": settings.currency,
    }


class StatsService:
    """Dashboard figures scoped to what the caller may see."""

    def __init__(self, ledger: BookingLedger):
        self.ledger = ledger

    async def get_dashboard_stats(self, session: Session) -> dict:
        if session.is_staff:
            yachts = await self.ledger.list_yachts(session)
            bookings = await self.ledger.list_bookings(session)
        elif session.is_owner:
            yachts = await self.ledger.list_yachts(session, owner_id=session.user_id)
            bookings = await self.ledger.list_bookings(session, yacht_ids=[y["id"] for y in yachts])
        else:
            raise AuthorizationError("Staff access required")
        return compute_stats(ensure_known_statuses(bookings), len(yachts))
