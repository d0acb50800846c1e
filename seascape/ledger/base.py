"""Base booking ledger interface.

All ledger adapters must implement this interface.
Business decisions (seat allocation, reference and QR issuance, status
transitions, QR validity) belong to the ledger. Adapters only translate
requests and responses.

Adapters report business rejections as ``success=False`` results and raise
``ExternalServiceError`` when the ledger cannot be reached or answers with
an error envelope.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum

from seascape.core.exceptions import ExternalServiceError, ValidationError
from seascape.core.session import Session
from seascape.domain.booking_state import normalize_status

SERVICE_NAME = "booking-ledger"


class LedgerType(str, Enum):
    """Supported ledger backends."""

    SUPABASE = "supabase"
    MEMORY = "memory"


@dataclass
class LedgerResult:
    """Result of a mutating ledger operation."""

    success: bool
    error_message: str | None = None


@dataclass
class CreateBookingResult:
    """Result of a booking creation request."""

    success: bool
    booking_id: str | None = None
    reference: str | None = None
    error_message: str | None = None


@dataclass
class ScanResult:
    """Raw ledger answer for a QR scan."""

    success: bool
    error_message: str | None = None
    booking_info: dict | None = None


@dataclass
class RegenerateQRResult:
    """Result of issuing a replacement QR token."""

    success: bool
    new_qr_code: str | None = None
    error_message: str | None = None


class BookingLedger(ABC):
    """Abstract base class for booking ledgers."""

    @property
    @abstractmethod
    def ledger_type(self) -> LedgerType:
        """Return the ledger type."""
        pass

    @abstractmethod
    async def create_booking(
        self,
        session: Session,
        yacht_id: str,
        booking_date: date,
        time_slot: str,
        seats: int,
        payment_method: str,
    ) -> CreateBookingResult:
        """Request a new booking.

        Args:
            session: Caller session (the booking owner)
            yacht_id: Yacht to book
            booking_date: Trip date
            time_slot: Start time, e.g. "10:00"
            seats: Number of seats
            payment_method: "online" or "cash"

        Returns:
            CreateBookingResult with the ledger-issued id and reference
        """
        pass

    @abstractmethod
    async def cancel_booking(self, session: Session, booking_id: str) -> LedgerResult:
        """Request cancellation; the ledger returns seats to availability."""
        pass

    @abstractmethod
    async def scan_booking(self, session: Session, qr_token: str) -> ScanResult:
        """Validate a QR token without changing any state."""
        pass

    @abstractmethod
    async def mark_booking_used(self, session: Session, booking_id: str) -> LedgerResult:
        """Consume a booking at check-in (irreversible)."""
        pass

    @abstractmethod
    async def admin_update_booking_status(
        self,
        session: Session,
        booking_id: str,
        new_status: str,
        notes: str | None = None,
    ) -> LedgerResult:
        """Administrative status change."""
        pass

    @abstractmethod
    async def regenerate_qr_code(self, session: Session, booking_id: str) -> RegenerateQRResult:
        """Replace a booking's QR token."""
        pass

    # Reads

    @abstractmethod
    async def list_yachts(self, session: Session | None = None, owner_id: str | None = None) -> list[dict]:
        """List yachts, optionally restricted to one owner."""
        pass

    @abstractmethod
    async def get_yacht(self, yacht_id: str, session: Session | None = None) -> dict | None:
        pass

    @abstractmethod
    async def get_slots_remaining(
        self,
        yacht_id: str,
        booking_date: date,
        session: Session | None = None,
    ) -> int | None:
        """Remaining seats for (yacht, date), or None when no counter exists."""
        pass

    @abstractmethod
    async def list_bookings(
        self,
        session: Session,
        user_id: str | None = None,
        yacht_ids: list[str] | None = None,
    ) -> list[dict]:
        """List bookings newest first with embedded ``yacht`` and ``profile``.

        Args:
            session: Caller session
            user_id: Restrict to one guest
            yacht_ids: Restrict to these yachts
        """
        pass

    @abstractmethod
    async def get_booking(self, session: Session, booking_id: str) -> dict | None:
        pass

    @abstractmethod
    async def list_status_history(self, session: Session, booking_id: str) -> list[dict]:
        pass

    @abstractmethod
    async def get_user_roles(self, session: Session) -> list[str]:
        """Role names granted to the session's user."""
        pass


def ensure_known_statuses(bookings: list[dict]) -> list[dict]:
    """Reject ledger rows whose status is outside the booking vocabulary.

    Raises:
        ExternalServiceError: A row carries a status this service cannot interpret
    """
    for booking in bookings:
        try:
            normalize_status(booking.get("status") or "")
        except ValidationError:
            raise ExternalServiceError(
                SERVICE_NAME,
                f"Unknown booking status {booking.get('status')!r} on booking {booking.get('id')}",
            )
    return bookings
