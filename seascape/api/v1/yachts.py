"""Yacht catalog endpoints."""

from datetime import date

from fastapi import APIRouter, Query

from seascape.api.deps import BookingServiceDep, LedgerDep, OptionalSession
from seascape.domain.booking_filters import filter_yachts
from seascape.schemas.yacht import AvailabilityResponse, YachtListResponse, YachtResponse

router = APIRouter()


@router.get("", response_model=YachtListResponse)
async def list_yachts(
    ledger: LedgerDep,
    session: OptionalSession,
    location: str | None = Query(None),
    yacht_type: str | None = Query(None, alias="type"),
    min_capacity: int | None = Query(None, ge=1),
    max_price: int | None = Query(None, ge=0),
) -> YachtListResponse:
    """List available yachts, highest rated first."""
    yachts = filter_yachts(
        await ledger.list_yachts(session),
        location=location,
        yacht_type=yacht_type,
        min_capacity=min_capacity,
        max_price=max_price,
    )
    return YachtListResponse(yachts=[YachtResponse(**y) for y in yachts], total=len(yachts))


@router.get("/{yacht_id}", response_model=YachtResponse)
async def get_yacht(
    yacht_id: str,
    booking_service: BookingServiceDep,
    session: OptionalSession,
) -> YachtResponse:
    """Get yacht details."""
    return YachtResponse(**await booking_service.get_yacht(yacht_id, session))


@router.get("/{yacht_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    yacht_id: str,
    booking_service: BookingServiceDep,
    session: OptionalSession,
    booking_date: date = Query(..., alias="date"),
) -> AvailabilityResponse:
    """Remaining seats for one date. Dates without bookings report full capacity."""
    yacht = await booking_service.get_yacht(yacht_id, session)
    remaining = await booking_service.get_slots_remaining(yacht, booking_date, session)
    return AvailabilityResponse(
        yacht_id=yacht_id,
        date=booking_date,
        capacity=yacht["capacity"],
        slots_remaining=remaining,
        max_seats=booking_service.max_seats(yacht, remaining),
    )
