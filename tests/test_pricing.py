from decimal import Decimal

import pytest

from seascape.services.pricing_service import PricingService


@pytest.fixture
def pricing():
    return PricingService(fee_percent=5)


def test_fee_rounds_half_up(pricing):
    # 2550 * 5% = 127.5
    assert pricing.calculate_platform_fee(2550) == 128


def test_three_seats_on_sea_queen(pricing):
    amounts = pricing.calculate_booking_amounts(850, 3)

    assert amounts["subtotal"] == 2550
    assert amounts["platform_fee"] == 128
    assert amounts["total"] == 2678
    assert amounts["fee_percent"] == 5.0


@pytest.mark.parametrize(
    "price,seats",
    [(850, 1), (450, 7), (650, 20), (1, 1), (999, 13), (0, 4)],
)
def test_total_is_subtotal_plus_fee(pricing, price, seats):
    amounts = pricing.calculate_booking_amounts(price, seats)

    assert amounts["subtotal"] == price * seats
    assert amounts["total"] == amounts["subtotal"] + amounts["platform_fee"]


def test_small_subtotal_fee():
    pricing = PricingService(fee_percent=Decimal("5"))

    assert pricing.calculate_platform_fee(9) == 0  # 0.45
    assert pricing.calculate_platform_fee(10) == 1  # 0.5 rounds up


def test_default_fee_comes_from_settings():
    assert PricingService().fee_percent == Decimal("5.0")
