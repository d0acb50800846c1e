"""Core utilities and security modules."""

from seascape.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingRejected,
    CaptureSessionError,
    ExternalServiceError,
    InvalidBookingStatus,
    NotFoundError,
    ValidationError,
)
from seascape.core.security import create_access_token, verify_token
from seascape.core.session import Role, Session

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BookingRejected",
    "CaptureSessionError",
    "ExternalServiceError",
    "InvalidBookingStatus",
    "NotFoundError",
    "ValidationError",
    "create_access_token",
    "verify_token",
    "Role",
    "Session",
]
