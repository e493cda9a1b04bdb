"""Margin between supplier cost and master (selling) rate."""

import datetime as dt
from decimal import Decimal

from allotment.models import (
    CurrencyMismatchError,
    DivisionByZeroError,
    MarginBreakdown,
    MarginResult,
    StayCostBreakdown,
)
from allotment.utils.logging import get_logger, log_pricing_operation

from .rates import RateResolver

logger = get_logger(__name__)


def compute_margin(
    supplier_cost: StayCostBreakdown,
    selling_price: StayCostBreakdown,
) -> MarginResult:
    """Derive absolute and percentage margin from two priced stays.

    Args:
        supplier_cost: Stay priced with the supplier's rate
        selling_price: Same stay priced with the master rate

    Returns:
        MarginResult with unrounded amounts

    Raises:
        CurrencyMismatchError: If the two stays are priced in different currencies
        DivisionByZeroError: If the selling price totals zero
    """
    if supplier_cost.currency != selling_price.currency:
        raise CurrencyMismatchError(
            details={
                "supplier_currency": supplier_cost.currency,
                "selling_currency": selling_price.currency,
            }
        )
    if selling_price.total_cost == 0:
        raise DivisionByZeroError(details={"rate_id": selling_price.rate_id})

    margin = selling_price.total_cost - supplier_cost.total_cost
    percentage = margin / selling_price.total_cost * Decimal(100)

    return MarginResult(
        supplier_cost=supplier_cost.total_cost,
        selling_price=selling_price.total_cost,
        margin=margin,
        margin_percentage=percentage,
        breakdown=MarginBreakdown(supplier=supplier_cost, master=selling_price),
    )


class MarginCalculator:
    """Service comparing a supplier's cost with the selling price of a stay."""

    def __init__(self, resolver: RateResolver) -> None:
        """Initialize margin calculator.

        Args:
            resolver: Rate resolver used for both sides of the margin
        """
        self.resolver = resolver

    def calculate_margin(
        self,
        org_id: str,
        variant_id: str,
        supplier_id: str,
        check_in: dt.date,
        check_out: dt.date,
        occupancy: int,
        room_type: str = "standard",
    ) -> MarginResult:
        """Calculate the margin for a prospective stay.

        Rate errors from either side propagate unchanged.

        Raises:
            NoRateFoundError: If either side has no covering rate document
            NoOccupancyTierError: If either side does not price the occupancy
            CurrencyMismatchError: If supplier and master rates use different currencies
            DivisionByZeroError: If the selling price totals zero
        """
        supplier_cost = self.resolver.resolve(
            org_id, variant_id, supplier_id, check_in, check_out, occupancy, room_type
        )
        selling_price = self.resolver.resolve(
            org_id, variant_id, None, check_in, check_out, occupancy, room_type
        )

        result = compute_margin(supplier_cost, selling_price)
        log_pricing_operation(
            logger,
            "calculate_margin",
            org_id=org_id,
            variant_id=variant_id,
            supplier_id=supplier_id,
            margin=result.margin,
        )
        return result
