"""QR check-in service.

A scan never changes state. Boarding is a separate, explicit request that
only proceeds from a verdict that allows it.
"""

import logging

from seascape.core.exceptions import BookingRejected, InvalidBookingStatus, ValidationError
from seascape.core.session import Session
from seascape.domain.scan_verdict import ScanVerdict, classify_scan
from seascape.ledger.base import BookingLedger

logger = logging.getLogger(__name__)


class CheckInService:
    """Scan QR tokens and confirm boarding."""

    def __init__(self, ledger: BookingLedger):
        self.ledger = ledger

    async def scan(self, session: Session, qr_data: str) -> ScanVerdict:
        """Validate a token with the ledger and classify the answer.

        Raises:
            ValidationError: Empty input
            ExternalServiceError: Ledger unreachable
        """
        token = (qr_data or "").strip()
        if not token:
            raise ValidationError("QR data is required")

        result = await self.ledger.scan_booking(session, token)
        verdict = classify_scan(result.success, result.error_message, result.booking_info)
        logger.info(f"Scan by {session.user_id}: {verdict.category.value}")
        return verdict

    async def confirm_boarding(self, session: Session, verdict: ScanVerdict) -> str:
        """Mark the verdict's booking as used.

        Returns:
            str: The boarded booking id

        Raises:
            InvalidBookingStatus: Verdict does not allow boarding
            BookingRejected: Ledger refused (e.g. already used by another device)
        """
        if not verdict.can_board:
            raise InvalidBookingStatus(f"Cannot board: {verdict.title}")

        booking_id = verdict.booking_id
        result = await self.ledger.mark_booking_used(session, booking_id)
        if not result.success:
            raise BookingRejected(result.error_message or "Failed to mark as used")

        logger.info(f"Booking {booking_id} boarded by {session.user_id}")
        return booking_id

    async def board(self, session: Session, qr_data: str) -> str:
        """Re-validate a token, then board it."""
        verdict = await self.scan(session, qr_data)
        return await self.confirm_boarding(session, verdict)
