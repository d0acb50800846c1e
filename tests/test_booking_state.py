import pytest

from seascape.core.exceptions import ValidationError
from seascape.domain.booking_state import (
    BookingStatus,
    assert_booking_transition,
    can_board,
    can_cancel,
    can_transition,
    is_terminal,
    normalize_status,
    status_label,
    status_tone,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("pending", BookingStatus.PENDING_PAYMENT),
        ("pending_payment", BookingStatus.PENDING_PAYMENT),
        ("CONFIRMED", BookingStatus.CONFIRMED),
        ("used", BookingStatus.BOARDED),
        ("boarded", BookingStatus.BOARDED),
        ("cancelled", BookingStatus.CANCELLED),
    ],
)
def test_normalize_status_accepts_legacy_names(raw, expected):
    assert normalize_status(raw) == expected


def test_normalize_status_rejects_unknown():
    with pytest.raises(ValidationError):
        normalize_status("refunded")


def test_forward_transitions():
    assert can_transition("pending_payment", "confirmed")
    assert can_transition("pending", "cancelled")
    assert can_transition("confirmed", "boarded")
    assert can_transition("confirmed", "cancelled")


def test_terminal_states_have_no_exits():
    for terminal in ("boarded", "used", "cancelled"):
        assert is_terminal(terminal)
        for target in BookingStatus:
            assert not can_transition(terminal, target)


def test_pending_cannot_skip_to_boarded():
    assert not can_transition("pending_payment", "boarded")
    with pytest.raises(ValidationError):
        assert_booking_transition("pending_payment", "boarded")


def test_cancel_rules():
    assert can_cancel("pending_payment") == (True, None)
    assert can_cancel("confirmed") == (True, None)

    allowed, reason = can_cancel("boarded")
    assert not allowed
    assert "already been used" in reason

    allowed, reason = can_cancel("cancelled")
    assert not allowed
    assert reason == "Booking is already cancelled"


def test_only_confirmed_can_board():
    assert can_board("confirmed") == (True, None)
    assert not can_board("pending_payment")[0]
    assert not can_board("cancelled")[0]
    assert not can_board("used")[0]


def test_labels_and_tones():
    assert status_label("pending") == "PENDING PAYMENT"
    assert status_label(BookingStatus.BOARDED) == "BOARDED"
    assert status_tone("cancelled") == "danger"
    assert status_tone("confirmed") == "info"
