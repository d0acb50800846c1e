"""Booking state machine.

States:
- pending_payment: Cash booking or awaiting payment confirmation
- confirmed: Payment verified, QR code valid for boarding
- boarded: Guest checked in (terminal)
- cancelled: Booking cancelled, seats returned (terminal)

The ledger also emits the legacy names ``pending`` and ``used``; they are
read as ``pending_payment`` and ``boarded``.
"""

from enum import Enum

from seascape.core.exceptions import ValidationError


class BookingStatus(str, Enum):
    """Canonical booking statuses."""

    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    BOARDED = "boarded"
    CANCELLED = "cancelled"


STATUS_ALIASES: dict[str, BookingStatus] = {
    "pending": BookingStatus.PENDING_PAYMENT,
    "used": BookingStatus.BOARDED,
}

BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING_PAYMENT: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.BOARDED, BookingStatus.CANCELLED},
    BookingStatus.BOARDED: set(),
    BookingStatus.CANCELLED: set(),
}

# Badge tone per status, consumed by the UI
STATUS_TONES: dict[BookingStatus, str] = {
    BookingStatus.PENDING_PAYMENT: "warning",
    BookingStatus.CONFIRMED: "info",
    BookingStatus.BOARDED: "success",
    BookingStatus.CANCELLED: "danger",
}


def normalize_status(value: str | BookingStatus) -> BookingStatus:
    """Map a ledger status string onto the canonical vocabulary.

    Raises:
        ValidationError: If the status is not recognized
    """
    if isinstance(value, BookingStatus):
        return value
    key = (value or "").strip().lower()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    try:
        return BookingStatus(key)
    except ValueError:
        raise ValidationError(f"Unknown booking status: {value!r}")


def is_terminal(status: str | BookingStatus) -> bool:
    return not BOOKING_TRANSITIONS[normalize_status(status)]


def can_transition(current: str | BookingStatus, target: str | BookingStatus) -> bool:
    return normalize_status(target) in BOOKING_TRANSITIONS[normalize_status(current)]


def assert_booking_transition(current: str | BookingStatus, target: str | BookingStatus) -> None:
    """Validate booking state transition.

    Args:
        current: Current booking status
        target: Target booking status

    Raises:
        ValidationError: If transition is not allowed
    """
    if not can_transition(current, target):
        raise ValidationError(
            f"Invalid booking transition: {normalize_status(current).value} → "
            f"{normalize_status(target).value}"
        )


def can_cancel(status: str | BookingStatus) -> tuple[bool, str | None]:
    """Check if a booking in this status may be cancelled."""
    current = normalize_status(status)
    if current == BookingStatus.CANCELLED:
        return False, "Booking is already cancelled"
    if current == BookingStatus.BOARDED:
        return False, "Booking has already been used and cannot be cancelled"
    return True, None


def can_board(status: str | BookingStatus) -> tuple[bool, str | None]:
    """Check if a booking in this status may be marked as boarded."""
    current = normalize_status(status)
    if current == BookingStatus.BOARDED:
        return False, "ALREADY USED - This booking has already been used"
    if current == BookingStatus.CANCELLED:
        return False, "CANCELLED - This booking was cancelled"
    if current == BookingStatus.PENDING_PAYMENT:
        return False, "PAYMENT NOT CONFIRMED - Booking is pending payment"
    return True, None


def status_label(status: str | BookingStatus) -> str:
    """Human-readable label, e.g. ``PENDING PAYMENT``."""
    return normalize_status(status).value.replace("_", " ").upper()


def status_tone(status: str | BookingStatus) -> str:
    return STATUS_TONES[normalize_status(status)]
