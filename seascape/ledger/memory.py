"""In-process booking ledger.

Holds yachts, availability counters, bookings, QR tokens, scan events and
status history in memory and applies the same business rules as the hosted
ledger's stored procedures. Used in development and tests.

Every mutation completes without awaiting, so concurrent requests on one
event loop cannot interleave inside an allocation.
"""

import logging
import uuid
from copy import deepcopy
from datetime import UTC, date, datetime

from seascape.core.session import Role, Session
from seascape.domain.booking_state import (
    BookingStatus,
    can_board,
    can_cancel,
    can_transition,
    is_terminal,
    normalize_status,
)
from seascape.ledger.base import (
    BookingLedger,
    CreateBookingResult,
    LedgerResult,
    LedgerType,
    RegenerateQRResult,
    ScanResult,
)
from seascape.services.pricing_service import PricingService
from seascape.utils.booking_reference import generate_booking_reference, generate_qr_token

logger = logging.getLogger(__name__)

PAYMENT_METHODS = {"online", "cash"}


def _now() -> str:
    return datetime.now(UTC).isoformat()


class InMemoryLedger(BookingLedger):
    """Reference ledger kept in process memory."""

    def __init__(
        self,
        yachts: list[dict] | None = None,
        profiles: list[dict] | None = None,
        roles: dict[str, list[str]] | None = None,
        pricing: PricingService | None = None,
        auto_confirm_online: bool = False,
    ):
        self.yachts: dict[str, dict] = {y["id"]: dict(y) for y in (yachts or [])}
        self.profiles: dict[str, dict] = {p["id"]: dict(p) for p in (profiles or [])}
        self.roles: dict[str, list[str]] = {k: list(v) for k, v in (roles or {}).items()}
        self.pricing = pricing or PricingService()
        # Online payments are confirmed by the payment webhook unless this is set
        self.auto_confirm_online = auto_confirm_online

        self.availability: dict[tuple[str, str], int] = {}
        self.bookings: dict[str, dict] = {}
        self.scans: list[dict] = []
        self.status_history: list[dict] = []

    @property
    def ledger_type(self) -> LedgerType:
        return LedgerType.MEMORY

    # Helpers

    def _has_role(self, session: Session, *roles: Role) -> bool:
        granted = set(self.roles.get(session.user_id, []))
        return any(r.value in granted for r in roles)

    def _is_staff(self, session: Session) -> bool:
        return self._has_role(session, Role.STAFF, Role.ADMIN)

    def _slots(self, yacht_id: str, booking_date: str) -> int:
        key = (yacht_id, booking_date)
        if key not in self.availability:
            return self.yachts[yacht_id]["capacity"]
        return self.availability[key]

    def _release_seats(self, booking: dict) -> None:
        key = (booking["yacht_id"], booking["date"])
        self.availability[key] = self._slots(*key) + booking["seats"]

    def _record_status(
        self,
        booking: dict,
        new_status: BookingStatus,
        changed_by: str,
        notes: str | None = None,
    ) -> None:
        self.status_history.append(
            {
                "id": str(uuid.uuid4()),
                "booking_id": booking["id"],
                "previous_status": booking["status"],
                "new_status": new_status.value,
                "changed_by": changed_by,
                "notes": notes,
                "created_at": _now(),
            }
        )
        booking["status"] = new_status.value
        booking["updated_at"] = _now()

    def _issued_tokens(self) -> set[str]:
        # Replaced tokens stay reserved so they are never handed to another booking
        tokens = {b["qr_code_data"] for b in self.bookings.values() if b.get("qr_code_data")}
        for booking in self.bookings.values():
            tokens.update(booking.get("_retired_tokens", []))
        return tokens

    def _view(self, booking: dict) -> dict:
        """Public copy of a booking with embedded yacht and guest profile."""
        yacht = self.yachts.get(booking["yacht_id"], {})
        row = {k: deepcopy(v) for k, v in booking.items() if not k.startswith("_")}
        row["yacht"] = {
            "name": yacht.get("name"),
            "name_ar": yacht.get("name_ar"),
            "location": yacht.get("location"),
            "image_urls": yacht.get("image_urls"),
            "owner_id": yacht.get("owner_id"),
        }
        row["profile"] = deepcopy(self.profiles.get(booking["user_id"]))
        return row

    def _booking_info(self, booking: dict) -> dict:
        yacht = self.yachts.get(booking["yacht_id"], {})
        profile = self.profiles.get(booking["user_id"], {})
        return {
            "booking_id": booking["id"],
            "booking_reference": booking["booking_reference"],
            "guest_name": profile.get("name"),
            "guest_email": profile.get("email"),
            "guest_phone": profile.get("phone"),
            "yacht_name": yacht.get("name"),
            "yacht_location": yacht.get("location"),
            "date": booking["date"],
            "time_slot": booking["time_slot"],
            "seats": booking["seats"],
            "total_price": booking["total_price"],
            "status": booking["status"],
            "payment_method": booking["payment_method"],
        }

    # Mutations

    async def create_booking(
        self,
        session: Session,
        yacht_id: str,
        booking_date: date,
        time_slot: str,
        seats: int,
        payment_method: str,
    ) -> CreateBookingResult:
        yacht = self.yachts.get(yacht_id)
        if not yacht or not yacht.get("is_available"):
            return CreateBookingResult(success=False, error_message="Yacht not available")
        if payment_method not in PAYMENT_METHODS:
            return CreateBookingResult(success=False, error_message="Invalid payment method")
        if seats < 1:
            return CreateBookingResult(success=False, error_message="At least one seat is required")
        if seats > yacht["capacity"]:
            return CreateBookingResult(
                success=False,
                error_message=f"Maximum {yacht['capacity']} guests allowed",
            )

        date_key = booking_date.isoformat()
        remaining = self._slots(yacht_id, date_key)
        if remaining <= 0:
            return CreateBookingResult(success=False, error_message="No seats available for this date")
        if seats > remaining:
            return CreateBookingResult(
                success=False,
                error_message=f"Only {remaining} seats available for this date",
            )

        amounts = self.pricing.calculate_booking_amounts(int(yacht["price_per_person"]), seats)
        reference = generate_booking_reference(
            lambda ref: any(b["booking_reference"] == ref for b in self.bookings.values())
        )
        issued = self._issued_tokens()
        token = generate_qr_token(reference, lambda t: t in issued)

        status = BookingStatus.PENDING_PAYMENT
        if payment_method == "online" and self.auto_confirm_online:
            status = BookingStatus.CONFIRMED

        booking_id = str(uuid.uuid4())
        now = _now()
        self.bookings[booking_id] = {
            "id": booking_id,
            "booking_reference": reference,
            "user_id": session.user_id,
            "yacht_id": yacht_id,
            "date": date_key,
            "time_slot": time_slot,
            "seats": seats,
            "subtotal": amounts["subtotal"],
            "platform_fee": amounts["platform_fee"],
            "total_price": amounts["total"],
            "payment_method": payment_method,
            "status": status.value,
            "qr_code_data": token,
            "notes": None,
            "admin_notes": None,
            "created_at": now,
            "updated_at": now,
        }
        self.availability[(yacht_id, date_key)] = remaining - seats
        logger.info(f"Booking {reference} created for yacht {yacht_id} on {date_key} ({seats} seats)")

        return CreateBookingResult(success=True, booking_id=booking_id, reference=reference)

    async def cancel_booking(self, session: Session, booking_id: str) -> LedgerResult:
        booking = self.bookings.get(booking_id)
        if not booking:
            return LedgerResult(success=False, error_message="Booking not found")
        if booking["user_id"] != session.user_id and not self._is_staff(session):
            return LedgerResult(success=False, error_message="Not authorized to cancel this booking")

        allowed, reason = can_cancel(booking["status"])
        if not allowed:
            return LedgerResult(success=False, error_message=reason)

        self._release_seats(booking)
        self._record_status(booking, BookingStatus.CANCELLED, session.user_id)
        logger.info(f"Booking {booking['booking_reference']} cancelled")
        return LedgerResult(success=True)

    async def scan_booking(self, session: Session, qr_token: str) -> ScanResult:
        if not self._is_staff(session):
            return ScanResult(success=False, error_message="Staff access required")

        booking = next(
            (b for b in self.bookings.values() if b.get("qr_code_data") == qr_token), None
        )
        if not booking:
            return ScanResult(success=False, error_message="INVALID - QR code not recognized")

        info = self._booking_info(booking)
        allowed, reason = can_board(booking["status"])
        if not allowed:
            return ScanResult(success=False, error_message=reason, booking_info=info)
        return ScanResult(success=True, booking_info=info)

    async def mark_booking_used(self, session: Session, booking_id: str) -> LedgerResult:
        if not self._is_staff(session):
            return LedgerResult(success=False, error_message="Staff access required")

        booking = self.bookings.get(booking_id)
        if not booking:
            return LedgerResult(success=False, error_message="Booking not found")

        allowed, reason = can_board(booking["status"])
        if not allowed:
            return LedgerResult(success=False, error_message=reason)

        self._record_status(booking, BookingStatus.BOARDED, session.user_id, "Checked in by QR scan")
        self.scans.append(
            {
                "id": str(uuid.uuid4()),
                "booking_id": booking_id,
                "staff_id": session.user_id,
                "scanned_at": _now(),
                "notes": None,
            }
        )
        logger.info(f"Booking {booking['booking_reference']} boarded")
        return LedgerResult(success=True)

    async def admin_update_booking_status(
        self,
        session: Session,
        booking_id: str,
        new_status: str,
        notes: str | None = None,
    ) -> LedgerResult:
        if not self._has_role(session, Role.ADMIN):
            return LedgerResult(success=False, error_message="Admin access required")

        booking = self.bookings.get(booking_id)
        if not booking:
            return LedgerResult(success=False, error_message="Booking not found")

        target = normalize_status(new_status)
        if not can_transition(booking["status"], target):
            return LedgerResult(
                success=False,
                error_message=f"Cannot change status from {booking['status']} to {target.value}",
            )

        if target == BookingStatus.CANCELLED:
            self._release_seats(booking)
        if notes:
            booking["admin_notes"] = notes
        self._record_status(booking, target, session.user_id, notes)
        return LedgerResult(success=True)

    async def regenerate_qr_code(self, session: Session, booking_id: str) -> RegenerateQRResult:
        if not self._has_role(session, Role.ADMIN):
            return RegenerateQRResult(success=False, error_message="Admin access required")

        booking = self.bookings.get(booking_id)
        if not booking:
            return RegenerateQRResult(success=False, error_message="Booking not found")
        if is_terminal(booking["status"]):
            return RegenerateQRResult(
                success=False,
                error_message=f"Cannot regenerate QR code for a {booking['status']} booking",
            )

        issued = self._issued_tokens()
        token = generate_qr_token(booking["booking_reference"], lambda t: t in issued)
        booking.setdefault("_retired_tokens", []).append(booking["qr_code_data"])
        booking["qr_code_data"] = token
        booking["updated_at"] = _now()
        return RegenerateQRResult(success=True, new_qr_code=token)

    # Reads

    async def list_yachts(self, session: Session | None = None, owner_id: str | None = None) -> list[dict]:
        yachts = [dict(y) for y in self.yachts.values()]
        if owner_id:
            yachts = [y for y in yachts if y.get("owner_id") == owner_id]
        return sorted(yachts, key=lambda y: y.get("rating") or 0, reverse=True)

    async def get_yacht(self, yacht_id: str, session: Session | None = None) -> dict | None:
        yacht = self.yachts.get(yacht_id)
        return dict(yacht) if yacht else None

    async def get_slots_remaining(
        self,
        yacht_id: str,
        booking_date: date,
        session: Session | None = None,
    ) -> int | None:
        return self.availability.get((yacht_id, booking_date.isoformat()))

    async def list_bookings(
        self,
        session: Session,
        user_id: str | None = None,
        yacht_ids: list[str] | None = None,
    ) -> list[dict]:
        rows = list(self.bookings.values())
        if user_id:
            rows = [b for b in rows if b["user_id"] == user_id]
        if yacht_ids is not None:
            rows = [b for b in rows if b["yacht_id"] in yacht_ids]
        rows.sort(key=lambda b: b["created_at"], reverse=True)
        return [self._view(b) for b in rows]

    async def get_booking(self, session: Session, booking_id: str) -> dict | None:
        booking = self.bookings.get(booking_id)
        return self._view(booking) if booking else None

    async def list_status_history(self, session: Session, booking_id: str) -> list[dict]:
        return [dict(h) for h in self.status_history if h["booking_id"] == booking_id]

    async def get_user_roles(self, session: Session) -> list[str]:
        return list(self.roles.get(session.user_id, [Role.GUEST.value]))


def demo_ledger() -> InMemoryLedger:
    """Ledger seeded with the launch catalog for local development."""
    return InMemoryLedger(
        yachts=[
            {
                "id": "5d6f8b1e-0c61-4f7a-9a55-1b9f3c2d4e01",
                "owner_id": None,
                "name": "Sea Queen 45ft",
                "name_ar": "ملكة البحر 45 قدم",
                "type": "private-yacht",
                "location": "north-coast",
                "capacity": 12,
                "price_per_person": 850,
                "price_per_hour": 2500,
                "description": "Luxury 45ft yacht for private parties and sunset cruises.",
                "amenities": ["WiFi", "Sound System", "AC", "Sunbeds", "Kitchen", "Bathroom"],
                "included": ["Captain", "Fuel", "Snorkeling Gear", "Soft Drinks", "Towels"],
                "image_urls": [],
                "rating": 4.9,
                "review_count": 127,
                "is_available": True,
            },
            {
                "id": "5d6f8b1e-0c61-4f7a-9a55-1b9f3c2d4e02",
                "owner_id": None,
                "name": "Ocean Spirit",
                "name_ar": "روح المحيط",
                "type": "speed-boat",
                "location": "alexandria",
                "capacity": 8,
                "price_per_person": 450,
                "price_per_hour": 1500,
                "description": "Fast speedboat trips along Alexandria's coastline.",
                "amenities": ["Life Jackets", "Sound System", "Cooler"],
                "included": ["Captain", "Fuel", "Water"],
                "image_urls": [],
                "rating": 4.7,
                "review_count": 89,
                "is_available": True,
            },
            {
                "id": "5d6f8b1e-0c61-4f7a-9a55-1b9f3c2d4e03",
                "owner_id": None,
                "name": "Sunset Dreamer",
                "name_ar": "حالم الغروب",
                "type": "catamaran",
                "location": "marsa-matruh",
                "capacity": 20,
                "price_per_person": 650,
                "price_per_hour": 3500,
                "description": "Spacious catamaran for group trips in Marsa Matruh.",
                "amenities": ["Dual Hulls", "Large Deck", "Shade Area", "Sound System", "BBQ Grill"],
                "included": ["Crew", "Fuel", "Snacks", "Snorkeling Gear"],
                "image_urls": [],
                "rating": 4.8,
                "review_count": 156,
                "is_available": True,
            },
        ]
    )
