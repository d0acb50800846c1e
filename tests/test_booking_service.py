from datetime import UTC, date, datetime, timedelta

import pytest

from seascape.config import settings
from seascape.core.exceptions import (
    AuthorizationError,
    BookingRejected,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from seascape.schemas.booking import BookingCreate, BookingQuoteRequest
from seascape.services import booking_service
from seascape.services.booking_service import BookingService, local_today
from tests.conftest import DRY_DOCK_ID, OCEAN_SPIRIT_ID, SEA_QUEEN_ID


@pytest.fixture
def service(ledger):
    return BookingService(ledger)


@pytest.mark.asyncio
async def test_quote_prices_seats(service):
    quote = await service.quote(BookingQuoteRequest(yacht_id=SEA_QUEEN_ID, seats=3))

    assert quote["available"]
    assert quote["max_seats"] == 12
    breakdown = quote["price_breakdown"]
    assert (breakdown["subtotal"], breakdown["platform_fee"], breakdown["total"]) == (2550, 128, 2678)
    assert breakdown["currency"] == "EGP"


@pytest.mark.asyncio
async def test_quote_uses_remaining_seats_for_date(service, guest_session, trip_date, book):
    await book(guest_session, seats=10)

    quote = await service.quote(BookingQuoteRequest(yacht_id=SEA_QUEEN_ID, seats=3, date=trip_date))

    assert not quote["available"]
    assert quote["max_seats"] == 2
    assert quote["unavailable_reason"] == "Only 2 spots available for this date"


@pytest.mark.asyncio
async def test_quote_unavailable_yacht(service):
    quote = await service.quote(BookingQuoteRequest(yacht_id=DRY_DOCK_ID, seats=1))

    assert not quote["available"]
    assert quote["unavailable_reason"] == "Yacht not available"


@pytest.mark.asyncio
async def test_quote_unknown_yacht(service):
    with pytest.raises(NotFoundError):
        await service.quote(BookingQuoteRequest(yacht_id="missing", seats=1))


@pytest.mark.asyncio
async def test_slots_fall_back_to_capacity(service, trip_date):
    yacht = await service.get_yacht(OCEAN_SPIRIT_ID)

    assert await service.get_slots_remaining(yacht, trip_date) == 8


@pytest.mark.asyncio
async def test_create_requires_date_and_time(service, guest_session, ledger):
    with pytest.raises(ValidationError) as exc:
        await service.create_booking(guest_session, BookingCreate(yacht_id=SEA_QUEEN_ID, seats=2))

    assert exc.value.detail == "Please select date and time"
    assert ledger.bookings == {}


@pytest.mark.asyncio
async def test_create_rejects_unknown_slot_and_past_date(service, guest_session, trip_date):
    with pytest.raises(ValidationError):
        await service.create_booking(
            guest_session,
            BookingCreate(yacht_id=SEA_QUEEN_ID, date=trip_date, time_slot="03:00", seats=1),
        )

    with pytest.raises(ValidationError):
        await service.create_booking(
            guest_session,
            BookingCreate(
                yacht_id=SEA_QUEEN_ID,
                date=date.today() - timedelta(days=2),
                time_slot="10:00",
                seats=1,
            ),
        )


class LateEveningUTC(datetime):
    """22:30 UTC on 1 July, already 2 July in Cairo."""

    @classmethod
    def now(cls, tz=None):
        return datetime(2026, 7, 1, 22, 30, tzinfo=UTC).astimezone(tz)


def test_past_date_check_uses_marina_calendar(service, monkeypatch):
    monkeypatch.setattr(booking_service, "datetime", LateEveningUTC)
    monkeypatch.setattr(settings, "timezone", "Africa/Cairo")

    assert local_today() == date(2026, 7, 2)
    with pytest.raises(ValidationError, match="past"):
        service.validate_booking_request(
            BookingCreate(yacht_id=SEA_QUEEN_ID, date=date(2026, 7, 1), time_slot="10:00", seats=1),
            max_seats=12,
        )
    service.validate_booking_request(
        BookingCreate(yacht_id=SEA_QUEEN_ID, date=date(2026, 7, 2), time_slot="10:00", seats=1),
        max_seats=12,
    )

    monkeypatch.setattr(settings, "timezone", "UTC")
    assert local_today() == date(2026, 7, 1)


@pytest.mark.asyncio
async def test_create_rejects_more_seats_than_remaining(service, guest_session, other_session, trip_date, book):
    await book(guest_session, seats=10)

    with pytest.raises(ValidationError) as exc:
        await service.create_booking(
            other_session,
            BookingCreate(yacht_id=SEA_QUEEN_ID, date=trip_date, time_slot="10:00", seats=3),
        )

    assert exc.value.detail == "Only 2 spots available for this date"


@pytest.mark.asyncio
async def test_create_returns_ledger_identifiers(service, guest_session, ledger, trip_date):
    result = await service.create_booking(
        guest_session,
        BookingCreate(yacht_id=SEA_QUEEN_ID, date=trip_date, time_slot="10:00", seats=2, payment_method="cash"),
    )

    assert result.booking_id in ledger.bookings
    assert result.reference.startswith("SEA-")


@pytest.mark.asyncio
async def test_ledger_rejection_surfaces_message(service, guest_session, ledger, trip_date):
    # Local checks pass but the ledger refuses the payment method
    data = BookingCreate(yacht_id=SEA_QUEEN_ID, date=trip_date, time_slot="10:00", seats=1)
    data.payment_method = "voucher"

    with pytest.raises(BookingRejected) as exc:
        await service.create_booking(guest_session, data)

    assert exc.value.detail == "Invalid payment method"


@pytest.mark.asyncio
async def test_cancel_after_boarding_is_rejected(service, ledger, guest_session, staff_session, admin_session, book):
    booking_id = await book(guest_session)
    await service.update_status(admin_session, booking_id, "confirmed")
    await ledger.mark_booking_used(staff_session, booking_id)

    with pytest.raises(BookingRejected) as exc:
        await service.cancel_booking(guest_session, booking_id)

    assert "already been used" in exc.value.detail


@pytest.mark.asyncio
async def test_update_status_requires_admin(service, guest_session, staff_session, book):
    booking_id = await book(guest_session)

    with pytest.raises(AuthorizationError):
        await service.update_status(staff_session, booking_id, "confirmed")


@pytest.mark.asyncio
async def test_update_status_validates_transition_locally(service, ledger, guest_session, admin_session, book):
    booking_id = await book(guest_session)

    with pytest.raises(ValidationError):
        await service.update_status(admin_session, booking_id, "boarded")
    with pytest.raises(ValidationError):
        await service.update_status(admin_session, booking_id, "refunded")

    assert ledger.bookings[booking_id]["status"] == "pending_payment"


@pytest.mark.asyncio
async def test_update_status_accepts_legacy_names(service, ledger, guest_session, admin_session, book):
    booking_id = await book(guest_session)

    await service.update_status(admin_session, booking_id, "confirmed", "Paid at the marina")
    await service.update_status(admin_session, booking_id, "cancelled")

    assert ledger.bookings[booking_id]["status"] == "cancelled"


@pytest.mark.asyncio
async def test_get_booking_access(service, guest_session, other_session, staff_session, owner_session, book):
    booking_id = await book(guest_session)

    assert (await service.get_booking(guest_session, booking_id))["id"] == booking_id
    assert (await service.get_booking(staff_session, booking_id))["id"] == booking_id
    # Sea Queen belongs to the owner
    assert (await service.get_booking(owner_session, booking_id))["id"] == booking_id

    with pytest.raises(AuthorizationError):
        await service.get_booking(other_session, booking_id)
    with pytest.raises(NotFoundError):
        await service.get_booking(guest_session, "missing")


@pytest.mark.asyncio
async def test_admin_list_scopes_and_filters(service, guest_session, other_session, staff_session, owner_session, book):
    on_sea_queen = await book(guest_session)
    on_ocean_spirit = await book(other_session, yacht_id=OCEAN_SPIRIT_ID)

    everything = await service.list_admin_bookings(staff_session)
    assert {b["id"] for b in everything} == {on_sea_queen, on_ocean_spirit}

    owned = await service.list_admin_bookings(owner_session)
    assert [b["id"] for b in owned] == [on_sea_queen]

    filtered = await service.list_admin_bookings(staff_session, search="mona", location="alexandria")
    assert [b["id"] for b in filtered] == [on_ocean_spirit]

    with pytest.raises(AuthorizationError):
        await service.list_admin_bookings(guest_session)


@pytest.mark.asyncio
async def test_regenerate_qr_code(service, ledger, guest_session, admin_session, book):
    booking_id = await book(guest_session)
    old = ledger.bookings[booking_id]["qr_code_data"]

    new = await service.regenerate_qr_code(admin_session, booking_id)

    assert new != old
    assert ledger.bookings[booking_id]["qr_code_data"] == new


@pytest.mark.asyncio
async def test_unknown_ledger_status_is_a_ledger_fault(service, ledger, guest_session, staff_session, book):
    booking_id = await book(guest_session)
    ledger.bookings[booking_id]["status"] = "refunded"

    with pytest.raises(ExternalServiceError):
        await service.get_booking(guest_session, booking_id)
    with pytest.raises(ExternalServiceError):
        await service.list_user_bookings(guest_session)
    with pytest.raises(ExternalServiceError):
        await service.list_admin_bookings(staff_session, status="confirmed")
