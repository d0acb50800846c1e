"""Booking endpoints."""

from fastapi import APIRouter, Query, Response, status

from seascape.api.deps import BookingServiceDep, CurrentSession, QRRendererDep
from seascape.core.exceptions import NotFoundError
from seascape.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingCreatedResponse,
    BookingListResponse,
    BookingQuoteRequest,
    BookingQuoteResponse,
    BookingResponse,
    QRCodeResponse,
)

router = APIRouter()


def _qr_token(booking: dict, booking_id: str) -> str:
    token = booking.get("qr_code_data")
    if not token:
        raise NotFoundError("QR code for booking", booking_id)
    return token


@router.post("/quote", response_model=BookingQuoteResponse)
async def quote_booking(
    request: BookingQuoteRequest,
    booking_service: BookingServiceDep,
) -> BookingQuoteResponse:
    """Calculate booking price without creating a booking."""
    return BookingQuoteResponse(**await booking_service.quote(request))


@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    session: CurrentSession,
    booking_service: BookingServiceDep,
) -> BookingCreatedResponse:
    """Create a booking.

    Seats, reference and QR token are allocated by the ledger. Fetch the
    booking afterwards for its status and amounts.
    """
    result = await booking_service.create_booking(session, data)
    return BookingCreatedResponse(booking_id=result.booking_id, reference=result.reference)


@router.get("", response_model=BookingListResponse)
async def list_my_bookings(
    session: CurrentSession,
    booking_service: BookingServiceDep,
) -> BookingListResponse:
    """List the caller's bookings, newest first."""
    bookings = await booking_service.list_user_bookings(session)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    session: CurrentSession,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    """Get booking details."""
    return BookingResponse.model_validate(await booking_service.get_booking(session, booking_id))


@router.post("/{booking_id}/cancel", response_model=BookingActionResponse)
async def cancel_booking(
    booking_id: str,
    session: CurrentSession,
    booking_service: BookingServiceDep,
) -> BookingActionResponse:
    """Cancel a booking. Seats return to availability."""
    await booking_service.cancel_booking(session, booking_id)
    return BookingActionResponse(booking_id=booking_id, message="Booking cancelled")


@router.get("/{booking_id}/qr", response_model=QRCodeResponse)
async def get_booking_qr(
    booking_id: str,
    session: CurrentSession,
    booking_service: BookingServiceDep,
    renderer: QRRendererDep,
) -> QRCodeResponse:
    """QR code for boarding. The image encodes only the booking's token."""
    booking = await booking_service.get_booking(session, booking_id)
    token = _qr_token(booking, booking_id)
    return QRCodeResponse(
        booking_id=booking_id,
        booking_reference=booking["booking_reference"],
        qr_code_data=token,
        image_url=renderer.image_url(token),
    )


@router.get(
    "/{booking_id}/qr.png",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def get_booking_qr_image(
    booking_id: str,
    session: CurrentSession,
    booking_service: BookingServiceDep,
    renderer: QRRendererDep,
    size: int | None = Query(None, ge=50, le=1000),
) -> Response:
    """Rendered QR image for printing or offline display."""
    booking = await booking_service.get_booking(session, booking_id)
    image = await renderer.render(_qr_token(booking, booking_id), size)
    return Response(content=image, media_type="image/png")
