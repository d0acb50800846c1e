"""Client-side filtering for admin booking lists and the yacht catalog.

Filters operate on ledger rows (plain dicts) and preserve input order.
A filter value of ``None``, ``""`` or ``"all"`` is inactive.
"""

from collections.abc import Iterable

from seascape.core.exceptions import ValidationError
from seascape.domain.booking_state import normalize_status

ALL = "all"


def _active(value) -> bool:
    return value is not None and value != "" and value != ALL


def _lower(value) -> str:
    return str(value).lower() if value is not None else ""


def _status_of(row: dict):
    try:
        return normalize_status(row.get("status") or "")
    except ValidationError:
        return None


def matches_search(booking: dict, term: str | None) -> bool:
    """Case-insensitive substring match on reference, guest and yacht name."""
    if not term:
        return True
    needle = term.lower()
    profile = booking.get("profile") or {}
    yacht = booking.get("yacht") or {}
    haystacks = (
        booking.get("booking_reference"),
        profile.get("name"),
        profile.get("email"),
        yacht.get("name"),
    )
    return any(needle in _lower(h) for h in haystacks if h is not None)


def filter_bookings(
    bookings: Iterable[dict],
    search: str | None = None,
    status: str | None = None,
    location: str | None = None,
) -> list[dict]:
    """Filter bookings by search term AND status AND yacht location.

    Args:
        bookings: Booking rows with optional embedded ``yacht`` and ``profile``
        search: Free-text term
        status: Exact status (aliases such as ``pending`` are accepted)
        location: Exact yacht location id

    Returns:
        list[dict]: Matching rows in input order
    """
    wanted_status = normalize_status(status) if _active(status) else None

    result = []
    for booking in bookings:
        if not matches_search(booking, search):
            continue
        if wanted_status is not None and _status_of(booking) != wanted_status:
            continue
        if _active(location) and (booking.get("yacht") or {}).get("location") != location:
            continue
        result.append(booking)
    return result


def filter_yachts(
    yachts: Iterable[dict],
    location: str | None = None,
    yacht_type: str | None = None,
    min_capacity: int | None = None,
    max_price: int | None = None,
    available_only: bool = True,
) -> list[dict]:
    """Filter catalog yachts, highest rated first."""
    result = []
    for yacht in yachts:
        if available_only and not yacht.get("is_available"):
            continue
        if _active(location) and yacht.get("location") != location:
            continue
        if _active(yacht_type) and yacht.get("type") != yacht_type:
            continue
        if min_capacity and yacht.get("capacity", 0) < min_capacity:
            continue
        if max_price and yacht.get("price_per_person", 0) > max_price:
            continue
        result.append(yacht)
    return sorted(result, key=lambda y: y.get("rating") or 0, reverse=True)
