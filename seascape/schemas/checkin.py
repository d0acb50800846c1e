"""QR check-in schemas."""

from pydantic import BaseModel, Field

from seascape.domain.scan_verdict import ScanCategory, ScanVerdict


class ScanRequest(BaseModel):
    """QR data from the camera or typed in by staff."""

    qr_data: str = Field(..., min_length=1, max_length=2048)


class BookingInfo(BaseModel):
    """Booking snapshot returned with a scan."""

    booking_id: str | None = None
    booking_reference: str | None = None
    guest_name: str | None = None
    guest_email: str | None = None
    guest_phone: str | None = None
    yacht_name: str | None = None
    yacht_location: str | None = None
    date: str | None = None
    time_slot: str | None = None
    seats: int | None = None
    total_price: int | None = None
    status: str | None = None
    payment_method: str | None = None


class ScanVerdictResponse(BaseModel):
    """Classified scan result with display metadata."""

    category: ScanCategory
    title: str
    subtitle: str
    tone: str
    can_board: bool
    reason: str | None = None
    booking_info: BookingInfo | None = None

    @classmethod
    def from_verdict(cls, verdict: ScanVerdict) -> "ScanVerdictResponse":
        return cls(
            category=verdict.category,
            title=verdict.title,
            subtitle=verdict.subtitle,
            tone=verdict.tone,
            can_board=verdict.can_board,
            reason=verdict.reason,
            booking_info=BookingInfo(**verdict.booking_info) if verdict.booking_info else None,
        )


class BoardingResponse(BaseModel):
    """Boarding confirmation. Re-scan to see the updated booking."""

    success: bool = True
    booking_id: str
    message: str = "Guest checked in successfully!"
