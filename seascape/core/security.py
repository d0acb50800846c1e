"""Access token handling.

Tokens are issued by the ledger's auth service; this service only verifies
them and derives a caller session.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from seascape.config import settings
from seascape.core.exceptions import AuthenticationError


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token shaped like the ledger's auth tokens."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire, "aud": settings.jwt_audience, "role": "authenticated"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT access token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")

    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")
    return payload
