"""Booking price calculation service.

CRITICAL BUSINESS LOGIC:
- Guests pay a per-person price for every seat booked
- SEASCAPE adds a flat 5% platform fee on the subtotal
- The fee is rounded half-up to a whole currency unit
- total = subtotal + platform fee, always

The ledger persists the same amounts independently; both sides must agree
for identical inputs.
"""

from decimal import ROUND_HALF_UP, Decimal

from seascape.config import settings


class PricingService:
    """Service for calculating booking amounts."""

    def __init__(self, fee_percent: float | Decimal | None = None):
        percent = settings.platform_fee_percent if fee_percent is None else fee_percent
        self.fee_percent = Decimal(str(percent))

    def calculate_platform_fee(self, subtotal: int) -> int:
        """Calculate the platform fee for a subtotal.

        Args:
            subtotal: Subtotal in whole currency units

        Returns:
            int: Fee rounded half-up, e.g. 2550 -> 128
        """
        fee = (Decimal(subtotal) * self.fee_percent / Decimal("100")).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        return int(fee)

    def calculate_booking_amounts(self, price_per_person: int, seats: int) -> dict:
        """Calculate all booking amounts.

        Args:
            price_per_person: Price of one seat
            seats: Number of seats booked

        Returns:
            dict: price_per_person, seats, subtotal, platform_fee, total
        """
        subtotal = price_per_person * seats
        platform_fee = self.calculate_platform_fee(subtotal)

        return {
            "price_per_person": price_per_person,
            "seats": seats,
            "subtotal": subtotal,
            "platform_fee": platform_fee,
            "total": subtotal + platform_fee,
            "fee_percent": float(self.fee_percent),
        }
