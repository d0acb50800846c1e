"""QR scan verdict classification.

The ledger reports scan outcomes as free text. All matching of that text
lives in ``REASON_CATEGORIES``; nothing else in the codebase inspects
ledger reason strings.
"""

from dataclasses import dataclass
from enum import Enum

from seascape.core.exceptions import ValidationError
from seascape.domain.booking_state import BookingStatus, normalize_status


class ScanCategory(str, Enum):
    """Display categories for a scanned QR code."""

    VALID_READY = "valid_ready"
    PAYMENT_PENDING = "payment_pending"
    CANCELLED = "cancelled"
    ALREADY_USED = "already_used"
    INVALID = "invalid"


# Ordered (substring, category) pairs, matched case-insensitively.
# First match wins, so payment reasons are checked before the rest.
REASON_CATEGORIES: list[tuple[str, ScanCategory]] = [
    ("payment not confirmed", ScanCategory.PAYMENT_PENDING),
    ("pending", ScanCategory.PAYMENT_PENDING),
    ("cancelled", ScanCategory.CANCELLED),
    ("already used", ScanCategory.ALREADY_USED),
    ("already boarded", ScanCategory.ALREADY_USED),
]

# Used when the ledger accepts the token but the snapshot is not boardable
STATUS_CATEGORIES: dict[BookingStatus, ScanCategory] = {
    BookingStatus.CONFIRMED: ScanCategory.VALID_READY,
    BookingStatus.PENDING_PAYMENT: ScanCategory.PAYMENT_PENDING,
    BookingStatus.CANCELLED: ScanCategory.CANCELLED,
    BookingStatus.BOARDED: ScanCategory.ALREADY_USED,
}

CATEGORY_DISPLAY: dict[ScanCategory, dict[str, str]] = {
    ScanCategory.VALID_READY: {
        "title": "VALID BOOKING",
        "subtitle": "Ready for boarding",
        "tone": "success",
    },
    ScanCategory.PAYMENT_PENDING: {
        "title": "PAYMENT PENDING",
        "subtitle": "Payment not yet confirmed",
        "tone": "warning",
    },
    ScanCategory.CANCELLED: {
        "title": "BOOKING CANCELLED",
        "subtitle": "This booking was cancelled",
        "tone": "danger",
    },
    ScanCategory.ALREADY_USED: {
        "title": "ALREADY USED",
        "subtitle": "This booking has already been used",
        "tone": "muted",
    },
    ScanCategory.INVALID: {
        "title": "INVALID",
        "subtitle": "QR code not recognized",
        "tone": "danger",
    },
}


@dataclass(frozen=True)
class ScanVerdict:
    """Classified result of scanning one QR token."""

    category: ScanCategory
    reason: str | None = None
    booking_info: dict | None = None

    @property
    def can_board(self) -> bool:
        return self.category == ScanCategory.VALID_READY and self.booking_id is not None

    @property
    def booking_id(self) -> str | None:
        if not self.booking_info:
            return None
        return self.booking_info.get("booking_id")

    @property
    def title(self) -> str:
        return CATEGORY_DISPLAY[self.category]["title"]

    @property
    def subtitle(self) -> str:
        # Unrecognized codes show the ledger's own explanation
        if self.category == ScanCategory.INVALID and self.reason:
            return self.reason
        return CATEGORY_DISPLAY[self.category]["subtitle"]

    @property
    def tone(self) -> str:
        return CATEGORY_DISPLAY[self.category]["tone"]


def classify_reason(reason: str | None) -> ScanCategory:
    """Map a ledger rejection reason to a display category."""
    text = (reason or "").lower()
    if text:
        for needle, category in REASON_CATEGORIES:
            if needle in text:
                return category
    return ScanCategory.INVALID


def classify_status(status: str | None) -> ScanCategory:
    """Map a snapshot status to a display category."""
    try:
        return STATUS_CATEGORIES[normalize_status(status or "")]
    except ValidationError:
        return ScanCategory.INVALID


def classify_scan(
    success: bool,
    error_message: str | None,
    booking_info: dict | None,
) -> ScanVerdict:
    """Build a verdict from a raw ledger scan response.

    Args:
        success: Ledger validity flag
        error_message: Ledger reason text, if any
        booking_info: Booking snapshot, if the token was recognized

    Returns:
        ScanVerdict
    """
    if success:
        status = booking_info.get("status") if booking_info else None
        category = classify_status(status)
    else:
        category = classify_reason(error_message)
    return ScanVerdict(category=category, reason=error_message, booking_info=booking_info)
