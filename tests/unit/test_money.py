"""Unit tests for display rounding."""

from decimal import Decimal

import pytest

from allotment.utils.money import minor_unit_exponent, round_money, round_percentage


class TestRoundMoney:
    """Tests for round_money."""

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("66.665", "66.67"),
            ("66.664", "66.66"),
            ("0.005", "0.01"),
            ("300", "300.00"),
        ],
    )
    def test_rounds_half_up_to_cents(self, amount: str, expected: str) -> None:
        assert str(round_money(Decimal(amount), "EUR")) == expected

    def test_zero_decimal_currency(self) -> None:
        assert str(round_money(Decimal("1234.5"), "JPY")) == "1235"

    def test_three_decimal_currency(self) -> None:
        assert str(round_money(Decimal("1.2345"), "KWD")) == "1.235"

    def test_currency_code_case_insensitive(self) -> None:
        assert minor_unit_exponent("jpy") == 0


class TestRoundPercentage:
    """Tests for round_percentage."""

    def test_two_places(self) -> None:
        assert str(round_percentage(Decimal("33.33333"))) == "33.33"

    def test_half_up(self) -> None:
        assert str(round_percentage(Decimal("12.345"))) == "12.35"
