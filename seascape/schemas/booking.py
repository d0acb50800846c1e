"""Booking-related Pydantic schemas."""

from datetime import date as date_type
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from seascape.domain.booking_state import BookingStatus, normalize_status, status_label, status_tone

PaymentMethod = Literal["online", "cash"]


class BookingQuoteRequest(BaseModel):
    """Schema for pricing a booking without creating it."""

    yacht_id: str
    seats: int = Field(default=1, ge=1, le=100)
    date: date_type | None = None


class BookingPriceBreakdown(BaseModel):
    """Schema for booking price breakdown."""

    price_per_person: int
    seats: int
    subtotal: int
    platform_fee: int
    total: int
    fee_percent: float
    currency: str


class BookingQuoteResponse(BaseModel):
    """Schema for booking price calculation response."""

    available: bool
    price_breakdown: BookingPriceBreakdown | None = None
    max_seats: int | None = None
    unavailable_reason: str | None = None


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    ``date`` and ``time_slot`` are optional here so that a missing choice
    is reported with the same message as the other booking checks.
    """

    yacht_id: str
    date: date_type | None = None
    time_slot: str | None = None
    seats: int = Field(default=1, ge=1, le=100)
    payment_method: PaymentMethod = "online"


class BookingCreatedResponse(BaseModel):
    """Identifiers of a newly created booking."""

    booking_id: str
    reference: str
    message: str = "Booking created"


class BookingYachtSummary(BaseModel):
    name: str | None = None
    name_ar: str | None = None
    location: str | None = None
    image_urls: list[str] | None = None


class GuestProfile(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_reference: str
    yacht_id: str
    user_id: str
    date: date_type
    time_slot: str
    seats: int

    # Pricing
    subtotal: int
    platform_fee: int
    total_price: int
    payment_method: str

    status: BookingStatus
    qr_code_data: str | None = None

    notes: str | None = None
    admin_notes: str | None = None
    created_at: datetime

    yacht: BookingYachtSummary | None = None
    profile: GuestProfile | None = None

    @field_validator("status", mode="before")
    @classmethod
    def canonical_status(cls, v):
        return normalize_status(v)

    @computed_field
    @property
    def status_label(self) -> str:
        return status_label(self.status)

    @computed_field
    @property
    def status_tone(self) -> str:
        return status_tone(self.status)


class BookingListResponse(BaseModel):
    """Schema for booking list."""

    bookings: list[BookingResponse]
    total: int


class BookingActionResponse(BaseModel):
    """Outcome of a lifecycle request. Callers re-read the booking afterwards."""

    success: bool = True
    booking_id: str
    message: str | None = None


class BookingStatusUpdate(BaseModel):
    """Schema for an administrative status change."""

    status: str = Field(..., min_length=1, max_length=32)
    notes: str | None = Field(None, max_length=1000)


class QRCodeResponse(BaseModel):
    """Display data for a booking's QR code."""

    booking_id: str
    booking_reference: str
    qr_code_data: str
    image_url: str


class StatusHistoryEntry(BaseModel):
    """One recorded status change."""

    id: str
    booking_id: str
    previous_status: str | None = None
    new_status: str
    changed_by: str | None = None
    notes: str | None = None
    created_at: datetime
