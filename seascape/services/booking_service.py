"""Booking lifecycle service.

Validates requests locally, forwards them to the booking ledger and turns
ledger rejections into exceptions. Nothing is written locally: callers
re-read bookings after every mutation.
"""

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from seascape.config import settings
from seascape.core.exceptions import (
    AuthorizationError,
    BookingRejected,
    NotFoundError,
    ValidationError,
)
from seascape.core.session import Session
from seascape.domain.booking_filters import filter_bookings
from seascape.domain.booking_state import assert_booking_transition, normalize_status
from seascape.ledger.base import BookingLedger, CreateBookingResult, ensure_known_statuses
from seascape.schemas.booking import BookingCreate, BookingQuoteRequest
from seascape.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


def local_today() -> date:
    """Today's date on the marina calendar."""
    return datetime.now(ZoneInfo(settings.timezone)).date()


class BookingService:
    """Customer and back-office booking operations."""

    def __init__(self, ledger: BookingLedger, pricing: PricingService | None = None):
        self.ledger = ledger
        self.pricing = pricing or PricingService()

    # Availability and pricing

    async def get_yacht(self, yacht_id: str, session: Session | None = None) -> dict:
        yacht = await self.ledger.get_yacht(yacht_id, session)
        if not yacht:
            raise NotFoundError("Yacht", yacht_id)
        return yacht

    async def get_slots_remaining(
        self,
        yacht: dict,
        booking_date: date,
        session: Session | None = None,
    ) -> int:
        """Remaining seats for a date; no counter means the yacht is empty."""
        remaining = await self.ledger.get_slots_remaining(yacht["id"], booking_date, session)
        return yacht["capacity"] if remaining is None else remaining

    @staticmethod
    def max_seats(yacht: dict, slots_remaining: int | None) -> int:
        if slots_remaining is None:
            return yacht["capacity"]
        return max(0, min(slots_remaining, yacht["capacity"]))

    async def quote(self, request: BookingQuoteRequest) -> dict:
        """Price a booking without creating it.

        Returns:
            dict: available, price_breakdown, max_seats, unavailable_reason
        """
        yacht = await self.get_yacht(request.yacht_id)
        if not yacht.get("is_available"):
            return {"available": False, "unavailable_reason": "Yacht not available"}

        slots = None
        if request.date:
            slots = await self.get_slots_remaining(yacht, request.date)
        max_seats = self.max_seats(yacht, slots)

        if request.seats > max_seats:
            return {
                "available": False,
                "max_seats": max_seats,
                "unavailable_reason": f"Only {max_seats} spots available for this date",
            }

        amounts = self.pricing.calculate_booking_amounts(int(yacht["price_per_person"]), request.seats)
        return {
            "available": True,
            "max_seats": max_seats,
            "price_breakdown": {**amounts, "currency": settings.currency},
        }

    def validate_booking_request(self, data: BookingCreate, max_seats: int) -> None:
        """Reject requests the ledger would refuse, before any round-trip.

        Raises:
            ValidationError: With a message fit for the booking form
        """
        if not data.date or not data.time_slot:
            raise ValidationError("Please select date and time")
        if data.time_slot not in settings.time_slots:
            raise ValidationError(f"Invalid time slot: {data.time_slot}")
        if data.date < local_today():
            raise ValidationError("Booking date cannot be in the past")
        if data.seats < 1:
            raise ValidationError("At least one seat is required")
        if data.seats > max_seats:
            raise ValidationError(f"Only {max_seats} spots available for this date")

    # Lifecycle

    async def create_booking(self, session: Session, data: BookingCreate) -> CreateBookingResult:
        """Request a booking from the ledger.

        Raises:
            ValidationError: Request is incomplete or exceeds availability
            BookingRejected: Ledger refused the booking
        """
        yacht = await self.get_yacht(data.yacht_id, session)
        max_seats = yacht["capacity"]
        if data.date:
            max_seats = self.max_seats(yacht, await self.get_slots_remaining(yacht, data.date, session))
        self.validate_booking_request(data, max_seats)

        result = await self.ledger.create_booking(
            session,
            yacht_id=data.yacht_id,
            booking_date=data.date,
            time_slot=data.time_slot,
            seats=data.seats,
            payment_method=data.payment_method,
        )
        if not result.success:
            logger.info(f"Booking rejected for user {session.user_id}: {result.error_message}")
            raise BookingRejected(result.error_message or "Booking failed")

        logger.info(f"Booking {result.reference} created by user {session.user_id}")
        return result

    async def cancel_booking(self, session: Session, booking_id: str) -> None:
        """Request cancellation.

        Raises:
            BookingRejected: Ledger refused (e.g. booking already used)
        """
        result = await self.ledger.cancel_booking(session, booking_id)
        if not result.success:
            raise BookingRejected(result.error_message or "Cancel failed")
        logger.info(f"Booking {booking_id} cancelled by user {session.user_id}")

    async def update_status(
        self,
        session: Session,
        booking_id: str,
        new_status: str,
        notes: str | None = None,
    ) -> None:
        """Administrative status change (e.g. confirming a cash payment)."""
        if not session.is_admin:
            raise AuthorizationError("Admin access required")

        target = normalize_status(new_status)
        booking = await self.get_booking(session, booking_id)
        assert_booking_transition(booking["status"], target)

        result = await self.ledger.admin_update_booking_status(session, booking_id, target.value, notes)
        if not result.success:
            raise BookingRejected(result.error_message or "Status update failed")
        logger.info(f"Booking {booking_id} set to {target.value} by admin {session.user_id}")

    async def regenerate_qr_code(self, session: Session, booking_id: str) -> str:
        if not session.is_admin:
            raise AuthorizationError("Admin access required")
        result = await self.ledger.regenerate_qr_code(session, booking_id)
        if not result.success or not result.new_qr_code:
            raise BookingRejected(result.error_message or "QR regeneration failed")
        return result.new_qr_code

    # Reads

    @staticmethod
    def _can_view(session: Session, booking: dict) -> bool:
        if session.is_staff or booking.get("user_id") == session.user_id:
            return True
        yacht = booking.get("yacht") or {}
        return session.is_owner and yacht.get("owner_id") == session.user_id

    async def get_booking(self, session: Session, booking_id: str) -> dict:
        booking = await self.ledger.get_booking(session, booking_id)
        if not booking:
            raise NotFoundError("Booking", booking_id)
        if not self._can_view(session, booking):
            raise AuthorizationError("You don't have permission to access this booking")
        ensure_known_statuses([booking])
        return booking

    async def list_user_bookings(self, session: Session) -> list[dict]:
        return ensure_known_statuses(
            await self.ledger.list_bookings(session, user_id=session.user_id)
        )

    async def owned_yacht_ids(self, session: Session) -> list[str]:
        yachts = await self.ledger.list_yachts(session, owner_id=session.user_id)
        return [y["id"] for y in yachts]

    async def list_admin_bookings(
        self,
        session: Session,
        search: str | None = None,
        status: str | None = None,
        location: str | None = None,
    ) -> list[dict]:
        """All bookings for staff, own-yacht bookings for owners, filtered."""
        if session.is_staff:
            bookings = await self.ledger.list_bookings(session)
        elif session.is_owner:
            bookings = await self.ledger.list_bookings(
                session, yacht_ids=await self.owned_yacht_ids(session)
            )
        else:
            raise AuthorizationError("Staff access required")
        ensure_known_statuses(bookings)
        return filter_bookings(bookings, search=search, status=status, location=location)

    async def list_status_history(self, session: Session, booking_id: str) -> list[dict]:
        await self.get_booking(session, booking_id)
        return await self.ledger.list_status_history(session, booking_id)
