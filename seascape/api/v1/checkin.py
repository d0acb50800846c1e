"""QR check-in endpoints (staff)."""

from fastapi import APIRouter

from seascape.api.deps import CheckInServiceDep, StaffSession
from seascape.schemas.checkin import BoardingResponse, ScanRequest, ScanVerdictResponse

router = APIRouter()


@router.post("/scan", response_model=ScanVerdictResponse)
async def scan_qr(
    request: ScanRequest,
    session: StaffSession,
    checkin_service: CheckInServiceDep,
) -> ScanVerdictResponse:
    """Validate a QR code. Does not change the booking."""
    verdict = await checkin_service.scan(session, request.qr_data)
    return ScanVerdictResponse.from_verdict(verdict)


@router.post("/board", response_model=BoardingResponse)
async def board_guest(
    request: ScanRequest,
    session: StaffSession,
    checkin_service: CheckInServiceDep,
) -> BoardingResponse:
    """Re-validate a QR code and mark the booking as used.

    Refused with 409 unless the code scans as ready for boarding.
    """
    booking_id = await checkin_service.board(session, request.qr_data)
    return BoardingResponse(booking_id=booking_id)
