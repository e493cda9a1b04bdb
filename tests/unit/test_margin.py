"""Unit tests for margin calculation."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from allotment.models import (
    CurrencyMismatchError,
    DivisionByZeroError,
    ErrorCode,
    NoRateFoundError,
    RateDocument,
    StayCostBreakdown,
)
from allotment.services.margin import MarginCalculator, compute_margin
from allotment.services.rates import RateResolver


def breakdown(rate_id: str, total: str, currency: str = "EUR") -> StayCostBreakdown:
    return StayCostBreakdown(
        rate_id=rate_id, total_cost=Decimal(total), block_nights=3, currency=currency
    )


class TestComputeMargin:
    """Tests for compute_margin."""

    def test_margin_and_percentage(self) -> None:
        result = compute_margin(breakdown("sup", "300"), breakdown("master", "500"))

        assert result.supplier_cost == Decimal("300")
        assert result.selling_price == Decimal("500")
        assert result.margin == Decimal("200")
        assert result.margin_percentage == Decimal("40")

    def test_negative_margin(self) -> None:
        result = compute_margin(breakdown("sup", "600"), breakdown("master", "500"))

        assert result.margin == Decimal("-100")
        assert result.margin_percentage == Decimal("-20")

    def test_keeps_both_breakdowns(self) -> None:
        result = compute_margin(breakdown("sup", "300"), breakdown("master", "500"))

        assert result.breakdown.supplier.rate_id == "sup"
        assert result.breakdown.master.rate_id == "master"

    def test_zero_selling_price_raises(self) -> None:
        with pytest.raises(DivisionByZeroError) as exc_info:
            compute_margin(breakdown("sup", "300"), breakdown("master", "0"))

        assert exc_info.value.code == ErrorCode.DIVISION_BY_ZERO
        assert exc_info.value.details == {"rate_id": "master"}

    def test_currency_mismatch_raises(self) -> None:
        with pytest.raises(CurrencyMismatchError) as exc_info:
            compute_margin(breakdown("sup", "45000", "JPY"), breakdown("master", "600"))

        assert exc_info.value.code == ErrorCode.CURRENCY_MISMATCH
        assert exc_info.value.details == {
            "supplier_currency": "JPY",
            "selling_currency": "EUR",
        }

    def test_currency_checked_before_zero_price(self) -> None:
        with pytest.raises(CurrencyMismatchError):
            compute_margin(breakdown("sup", "300", "USD"), breakdown("master", "0"))


class TestMarginCalculator:
    """Tests for MarginCalculator service."""

    def test_prices_supplier_then_master(
        self, supplier_rate: RateDocument, master_rate: RateDocument
    ) -> None:
        rates = MagicMock()
        rates.list_rate_documents.return_value = [supplier_rate, master_rate]
        calculator = MarginCalculator(resolver=RateResolver(rates=rates))

        result = calculator.calculate_margin(
            "org-1", "pv-100", "sup-7", date(2025, 7, 15), date(2025, 7, 18), 2
        )

        assert result.supplier_cost == Decimal("300")
        assert result.selling_price == Decimal("600")
        assert result.margin == Decimal("300")
        assert result.margin_percentage == Decimal("50")

    def test_missing_master_rate_propagates(self, supplier_rate: RateDocument) -> None:
        rates = MagicMock()
        rates.list_rate_documents.return_value = [supplier_rate]
        calculator = MarginCalculator(resolver=RateResolver(rates=rates))

        with pytest.raises(NoRateFoundError):
            calculator.calculate_margin(
                "org-1", "pv-100", "sup-7", date(2025, 7, 15), date(2025, 7, 18), 2
            )

    def test_supplier_in_other_currency_raises(
        self, supplier_rate: RateDocument, master_rate: RateDocument
    ) -> None:
        rates = MagicMock()
        rates.list_rate_documents.return_value = [
            supplier_rate.model_copy(update={"currency": "JPY"}),
            master_rate,
        ]
        calculator = MarginCalculator(resolver=RateResolver(rates=rates))

        with pytest.raises(CurrencyMismatchError):
            calculator.calculate_margin(
                "org-1", "pv-100", "sup-7", date(2025, 7, 15), date(2025, 7, 18), 2
            )

    def test_resolver_called_for_both_sides(self) -> None:
        resolver = MagicMock()
        resolver.resolve.side_effect = [breakdown("sup", "300"), breakdown("master", "500")]
        calculator = MarginCalculator(resolver=resolver)

        calculator.calculate_margin(
            "org-1", "pv-100", "sup-7", date(2025, 7, 15), date(2025, 7, 18), 2
        )

        calls = resolver.resolve.call_args_list
        assert calls[0].args[2] == "sup-7"
        assert calls[1].args[2] is None
