"""
Tests for platform fee calculations.
"""

from decimal import Decimal

import pytest

from apps.billing.fees import (
    BOLETO_FEES,
    CARD_FEES,
    PIX_FEES,
    PLATFORM_FEE_RATE,
    application_fee_percent,
    build_fee_split,
    calculate_application_fee,
    estimate_fees,
    to_minor_units,
)


class TestCalculateApplicationFee:
    """Tests for calculate_application_fee."""

    @pytest.mark.parametrize(
        ("unit_amount", "expected"),
        [
            (10000, 500),
            (8990, 449),  # 449.5 rounds down
            (19, 0),
            (20, 1),
            (0, 0),
        ],
    )
    def test_five_percent_rounded_down(self, unit_amount: int, expected: int) -> None:
        assert calculate_application_fee(unit_amount) == expected

    def test_never_exceeds_five_percent(self) -> None:
        for amount in range(0, 2000, 7):
            assert calculate_application_fee(amount) <= amount * PLATFORM_FEE_RATE

    def test_returns_int(self) -> None:
        assert isinstance(calculate_application_fee(12345), int)


class TestBuildFeeSplit:
    """Tests for build_fee_split."""

    def test_one_time_uses_fixed_amount(self) -> None:
        split = build_fee_split(8990, recurring=False)

        assert split.as_payment_link_params() == {
            "payment_intent_data": {"application_fee_amount": 449},
        }

    def test_recurring_uses_percentage(self) -> None:
        split = build_fee_split(8990, recurring=True)

        assert split.as_payment_link_params() == {
            "subscription_data": {"application_fee_percent": 5.0},
        }

    def test_percent_is_exactly_five(self) -> None:
        assert application_fee_percent() == 5.0


class TestEstimateFees:
    """Tests for the display-only estimate."""

    def test_card_estimate_for_one_hundred(self) -> None:
        """5.00 platform + 4.38 card fee (3.99% + 0.39) leaves 90.62."""
        estimate = estimate_fees(Decimal("100.00"))

        assert estimate.platform_fee == Decimal("5.00")
        assert estimate.estimated_processor_fee == Decimal("4.38")
        assert estimate.estimated_net == Decimal("90.62")
        assert estimate.method == "card"

    def test_accepts_strings(self) -> None:
        assert estimate_fees("89.90").price == Decimal("89.90")

    def test_card_is_the_most_expensive_method_for_typical_prices(self) -> None:
        price = Decimal("150.00")

        assert CARD_FEES.fee_for(price) > PIX_FEES.fee_for(price)
        assert CARD_FEES.fee_for(price) > BOLETO_FEES.fee_for(price)

    def test_estimate_differs_from_split(self) -> None:
        """The processor fee is never folded into the Stripe application fee."""
        estimate = estimate_fees(Decimal("100.00"))
        split = build_fee_split(10000, recurring=False)

        assert split.application_fee_amount == 500
        assert estimate.platform_fee + estimate.estimated_processor_fee != Decimal("5.00")


class TestToMinorUnits:
    """Tests for to_minor_units."""

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [("89.90", 8990), ("0.005", 1), ("10", 1000), (Decimal("19.99"), 1999)],
    )
    def test_converts_to_centavos(self, amount, expected: int) -> None:
        assert to_minor_units(amount) == expected
