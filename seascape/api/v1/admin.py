"""Back-office endpoints."""

from fastapi import APIRouter, Query

from seascape.api.deps import (
    AdminSession,
    BackOfficeSession,
    BookingServiceDep,
    QRRendererDep,
    StatsServiceDep,
)
from seascape.schemas.booking import (
    BookingActionResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    QRCodeResponse,
    StatusHistoryEntry,
)
from seascape.schemas.stats import DashboardStats

router = APIRouter()


@router.get("/bookings", response_model=BookingListResponse)
async def list_bookings(
    session: BackOfficeSession,
    booking_service: BookingServiceDep,
    search: str | None = Query(None, max_length=100),
    status: str | None = Query(None),
    location: str | None = Query(None),
) -> BookingListResponse:
    """List bookings (owners see their own yachts only).

    ``status`` and ``location`` accept ``all``.
    """
    bookings = await booking_service.list_admin_bookings(
        session, search=search, status=status, location=location
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.post("/bookings/{booking_id}/status", response_model=BookingActionResponse)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    session: AdminSession,
    booking_service: BookingServiceDep,
) -> BookingActionResponse:
    """Change a booking's status, e.g. confirm a cash payment."""
    await booking_service.update_status(session, booking_id, data.status, data.notes)
    return BookingActionResponse(booking_id=booking_id, message="Status updated")


@router.post("/bookings/{booking_id}/regenerate-qr", response_model=QRCodeResponse)
async def regenerate_qr_code(
    booking_id: str,
    session: AdminSession,
    booking_service: BookingServiceDep,
    renderer: QRRendererDep,
) -> QRCodeResponse:
    """Issue a replacement QR token. The previous token stops scanning."""
    token = await booking_service.regenerate_qr_code(session, booking_id)
    booking = await booking_service.get_booking(session, booking_id)
    return QRCodeResponse(
        booking_id=booking_id,
        booking_reference=booking["booking_reference"],
        qr_code_data=token,
        image_url=renderer.image_url(token),
    )


@router.get("/bookings/{booking_id}/history", response_model=list[StatusHistoryEntry])
async def get_status_history(
    booking_id: str,
    session: BackOfficeSession,
    booking_service: BookingServiceDep,
) -> list[StatusHistoryEntry]:
    """Recorded status changes for a booking."""
    history = await booking_service.list_status_history(session, booking_id)
    return [StatusHistoryEntry(**h) for h in history]


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    session: BackOfficeSession,
    stats_service: StatsServiceDep,
) -> DashboardStats:
    """Revenue, status counts and occupancy."""
    return DashboardStats(**await stats_service.get_dashboard_stats(session))
