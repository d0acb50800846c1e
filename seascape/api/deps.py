"""API dependencies for authentication and common operations."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from seascape.core.exceptions import AuthenticationError, AuthorizationError
from seascape.core.security import verify_token
from seascape.core.session import Session
from seascape.ledger.base import BookingLedger
from seascape.services.booking_service import BookingService
from seascape.services.checkin_service import CheckInService
from seascape.services.ledger_service import get_ledger
from seascape.services.qr_renderer import QRRenderer, qr_renderer
from seascape.services.stats_service import StatsService

# Security scheme
security = HTTPBearer()


def get_booking_ledger() -> BookingLedger:
    """Get the configured booking ledger."""
    return get_ledger()


LedgerDep = Annotated[BookingLedger, Depends(get_booking_ledger)]


async def _build_session(token: str, ledger: BookingLedger) -> Session:
    payload = verify_token(token)
    session = Session(user_id=payload["sub"], access_token=token, email=payload.get("email"))
    return session.with_roles(await ledger.get_user_roles(session))


async def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    ledger: LedgerDep,
) -> Session:
    """Get the caller session from the bearer token."""
    return await _build_session(credentials.credentials, ledger)


async def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))],
    ledger: LedgerDep,
) -> Session | None:
    """Optionally get the caller session if authenticated."""
    if not credentials:
        return None
    try:
        return await _build_session(credentials.credentials, ledger)
    except AuthenticationError:
        return None


CurrentSession = Annotated[Session, Depends(get_current_session)]
OptionalSession = Annotated[Session | None, Depends(get_optional_session)]


async def get_staff_session(session: CurrentSession) -> Session:
    """Get caller session and verify staff (or admin) access."""
    if not session.is_staff:
        raise AuthorizationError("Staff access required")
    return session


async def get_back_office_session(session: CurrentSession) -> Session:
    """Staff, admins and yacht owners."""
    if not (session.is_staff or session.is_owner):
        raise AuthorizationError("Staff access required")
    return session


async def get_admin_session(session: CurrentSession) -> Session:
    """Get caller session and verify admin access."""
    if not session.is_admin:
        raise AuthorizationError("Admin access required")
    return session


StaffSession = Annotated[Session, Depends(get_staff_session)]
BackOfficeSession = Annotated[Session, Depends(get_back_office_session)]
AdminSession = Annotated[Session, Depends(get_admin_session)]


def get_booking_service(ledger: LedgerDep) -> BookingService:
    return BookingService(ledger)


def get_checkin_service(ledger: LedgerDep) -> CheckInService:
    return CheckInService(ledger)


def get_stats_service(ledger: LedgerDep) -> StatsService:
    return StatsService(ledger)


def get_qr_renderer() -> QRRenderer:
    return qr_renderer


BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
CheckInServiceDep = Annotated[CheckInService, Depends(get_checkin_service)]
StatsServiceDep = Annotated[StatsService, Depends(get_stats_service)]
QRRendererDep = Annotated[QRRenderer, Depends(get_qr_renderer)]
