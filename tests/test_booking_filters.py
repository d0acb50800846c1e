import pytest

from seascape.core.exceptions import ValidationError
from seascape.domain.booking_filters import filter_bookings, filter_yachts, matches_search

BOOKINGS = [
    {
        "id": "1",
        "booking_reference": "SEA-AAAA1111",
        "status": "confirmed",
        "profile": {"name": "Ahmed Hassan", "email": "ahmed@example.com"},
        "yacht": {"name": "Sea Queen 45ft", "location": "north-coast"},
    },
    {
        "id": "2",
        "booking_reference": "SEA-BBBB2222",
        "status": "pending",
        "profile": {"name": "Mona Adel", "email": "mona@example.com"},
        "yacht": {"name": "Ocean Spirit", "location": "alexandria"},
    },
    {
        "id": "3",
        "booking_reference": "SEA-CCCC3333",
        "status": "used",
        "profile": None,
        "yacht": {"name": "Sea Queen 45ft", "location": "north-coast"},
    },
    {
        "id": "4",
        "booking_reference": "SEA-DDDD4444",
        "status": "cancelled",
        "profile": {"name": "Omar Farouk", "email": None},
        "yacht": None,
    },
]


def ids(rows):
    return [r["id"] for r in rows]


def test_no_filters_returns_everything_in_order():
    assert ids(filter_bookings(BOOKINGS)) == ["1", "2", "3", "4"]
    assert ids(filter_bookings(BOOKINGS, search="", status="all", location="all")) == ["1", "2", "3", "4"]


def test_search_is_case_insensitive_across_fields():
    assert ids(filter_bookings(BOOKINGS, search="sea-bbbb")) == ["2"]
    assert ids(filter_bookings(BOOKINGS, search="AHMED")) == ["1"]
    assert ids(filter_bookings(BOOKINGS, search="mona@")) == ["2"]
    assert ids(filter_bookings(BOOKINGS, search="queen")) == ["1", "3"]


def test_missing_profile_and_yacht_do_not_match_or_fail():
    assert not matches_search(BOOKINGS[3], "queen")
    assert matches_search(BOOKINGS[3], "omar")


def test_status_filter_accepts_aliases():
    assert ids(filter_bookings(BOOKINGS, status="pending_payment")) == ["2"]
    assert ids(filter_bookings(BOOKINGS, status="pending")) == ["2"]
    assert ids(filter_bookings(BOOKINGS, status="boarded")) == ["3"]


def test_unknown_status_filter_is_rejected():
    with pytest.raises(ValidationError):
        filter_bookings(BOOKINGS, status="refunded")


def test_status_and_search_example():
    rows = [
        {"id": "A", "booking_reference": "SEA-A", "status": "pending"},
        {"id": "B", "booking_reference": "SEA-B", "status": "confirmed"},
    ]

    assert ids(filter_bookings(rows, status="confirmed")) == ["B"]
    assert ids(filter_bookings(rows, search="zzz", status="confirmed")) == []


def test_filters_combine_with_and():
    assert ids(filter_bookings(BOOKINGS, search="queen", status="confirmed")) == ["1"]
    assert ids(filter_bookings(BOOKINGS, search="queen", location="alexandria")) == []
    assert ids(filter_bookings(BOOKINGS, location="north-coast")) == ["1", "3"]


def test_filter_yachts():
    yachts = [
        {"id": "a", "location": "alexandria", "type": "speed-boat", "capacity": 8, "price_per_person": 450, "rating": 4.7, "is_available": True},
        {"id": "b", "location": "north-coast", "type": "private-yacht", "capacity": 12, "price_per_person": 850, "rating": 4.9, "is_available": True},
        {"id": "c", "location": "north-coast", "type": "catamaran", "capacity": 20, "price_per_person": 650, "rating": 4.8, "is_available": False},
    ]

    assert ids(filter_yachts(yachts)) == ["b", "a"]
    assert ids(filter_yachts(yachts, location="north-coast")) == ["b"]
    assert ids(filter_yachts(yachts, min_capacity=10, available_only=False)) == ["b", "c"]
    assert ids(filter_yachts(yachts, max_price=500)) == ["a"]
    assert ids(filter_yachts(yachts, yacht_type="all")) == ["b", "a"]
