import pytest

from seascape.domain.scan_verdict import (
    ScanCategory,
    classify_reason,
    classify_scan,
    classify_status,
)

SNAPSHOT = {
    "booking_id": "b-1",
    "booking_reference": "SEA-ABCD1234",
    "guest_name": "Ahmed Hassan",
    "status": "confirmed",
}


@pytest.mark.parametrize(
    "reason,expected",
    [
        ("PAYMENT NOT CONFIRMED - Booking is pending payment", ScanCategory.PAYMENT_PENDING),
        ("Booking is pending", ScanCategory.PAYMENT_PENDING),
        ("CANCELLED - This booking was cancelled", ScanCategory.CANCELLED),
        ("ALREADY USED - This booking has already been used", ScanCategory.ALREADY_USED),
        ("Guest already boarded", ScanCategory.ALREADY_USED),
        ("Invalid QR code", ScanCategory.INVALID),
        ("something the ledger invented yesterday", ScanCategory.INVALID),
        ("", ScanCategory.INVALID),
        (None, ScanCategory.INVALID),
    ],
)
def test_classify_reason(reason, expected):
    assert classify_reason(reason) == expected


def test_payment_reason_wins_over_later_entries():
    # Mentions both; the payment entry comes first in the table
    assert classify_reason("Pending payment, not cancelled") == ScanCategory.PAYMENT_PENDING


def test_classify_status_unknown_is_invalid():
    assert classify_status("refunded") == ScanCategory.INVALID
    assert classify_status(None) == ScanCategory.INVALID


def test_valid_scan_is_ready_for_boarding():
    verdict = classify_scan(True, None, SNAPSHOT)

    assert verdict.category == ScanCategory.VALID_READY
    assert verdict.can_board
    assert verdict.booking_id == "b-1"
    assert verdict.title == "VALID BOOKING"
    assert verdict.tone == "success"


def test_successful_scan_of_pending_snapshot_cannot_board():
    verdict = classify_scan(True, None, {**SNAPSHOT, "status": "pending"})

    assert verdict.category == ScanCategory.PAYMENT_PENDING
    assert not verdict.can_board


def test_rejected_scan_keeps_snapshot():
    verdict = classify_scan(False, "CANCELLED - This booking was cancelled", {**SNAPSHOT, "status": "cancelled"})

    assert verdict.category == ScanCategory.CANCELLED
    assert verdict.booking_info["booking_reference"] == "SEA-ABCD1234"
    assert not verdict.can_board


def test_invalid_verdict_shows_ledger_reason():
    verdict = classify_scan(False, "INVALID - QR code not recognized", None)

    assert verdict.category == ScanCategory.INVALID
    assert verdict.subtitle == "INVALID - QR code not recognized"
    assert verdict.booking_id is None
    assert not verdict.can_board


def test_valid_without_snapshot_cannot_board():
    verdict = classify_scan(True, None, None)

    assert verdict.category == ScanCategory.INVALID
    assert not verdict.can_board
