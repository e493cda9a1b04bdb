"""API models for pricing endpoints.

Library results carry unrounded Decimals; the response models here round
them half-up to the currency's minor unit for display.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from allotment.models import MarginResult, RateDocument, StayCostBreakdown
from allotment.utils.money import round_money, round_percentage


class StayPricingRequest(BaseModel):
    """Stay to price."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "product_variant_id": "pv-100",
                    "supplier_id": "sup-7",
                    "check_in": "2025-07-15",
                    "check_out": "2025-07-18",
                    "occupancy": 2,
                    "room_type": "standard",
                }
            ]
        }
    )

    product_variant_id: str = Field(..., min_length=1, description="Product variant id")
    supplier_id: str | None = Field(
        default=None,
        description="Supplier whose cost rate applies; omit for the selling price",
    )
    check_in: dt.date = Field(..., description="Arrival date (YYYY-MM-DD)")
    check_out: dt.date = Field(..., description="Departure date, exclusive (YYYY-MM-DD)")
    occupancy: int = Field(..., ge=1, le=10, description="Number of guests")
    room_type: str = Field(default="standard", description="Room type")


class MarginRequest(StayPricingRequest):
    """Stay to compute a margin for; the supplier is required."""

    supplier_id: str = Field(..., min_length=1, description="Supplier whose cost applies")  # type: ignore[assignment]


class StayCostResponse(BaseModel):
    """Stay cost breakdown rounded for display."""

    rate_id: str
    currency: str
    total_cost: Decimal
    block_nights: int
    extra_before_nights: int
    extra_after_nights: int
    block_cost: Decimal
    extra_before_cost: Decimal
    extra_after_cost: Decimal
    block_rate: Decimal
    extra_before_rate: Decimal
    extra_after_rate: Decimal

    @classmethod
    def from_breakdown(cls, breakdown: StayCostBreakdown) -> "StayCostResponse":
        currency = breakdown.currency

        def money(amount: Decimal) -> Decimal:
            return round_money(amount, currency)

        return cls(
            rate_id=breakdown.rate_id,
            currency=currency,
            total_cost=money(breakdown.total_cost),
            block_nights=breakdown.block_nights,
            extra_before_nights=breakdown.extra_before_nights,
            extra_after_nights=breakdown.extra_after_nights,
            block_cost=money(breakdown.block_cost),
            extra_before_cost=money(breakdown.extra_before_cost),
            extra_after_cost=money(breakdown.extra_after_cost),
            block_rate=money(breakdown.block_rate),
            extra_before_rate=money(breakdown.extra_before_rate),
            extra_after_rate=money(breakdown.extra_after_rate),
        )


class MarginBreakdownResponse(BaseModel):
    supplier: StayCostResponse
    master: StayCostResponse


class MarginResponse(BaseModel):
    """Margin of a stay rounded for display."""

    currency: str
    supplier_cost: Decimal
    selling_price: Decimal
    margin: Decimal
    margin_percentage: Decimal = Field(..., description="Margin over selling price, in percent")
    breakdown: MarginBreakdownResponse

    @classmethod
    def from_result(cls, result: MarginResult) -> "MarginResponse":
        currency = result.breakdown.master.currency
        return cls(
            currency=currency,
            supplier_cost=round_money(result.supplier_cost, currency),
            selling_price=round_money(result.selling_price, currency),
            margin=round_money(result.margin, currency),
            margin_percentage=round_percentage(result.margin_percentage),
            breakdown=MarginBreakdownResponse(
                supplier=StayCostResponse.from_breakdown(result.breakdown.supplier),
                master=StayCostResponse.from_breakdown(result.breakdown.master),
            ),
        )


class RateSummary(BaseModel):
    """A rate document covering the requested stay."""

    rate_id: str
    supplier_id: str | None
    is_master_rate: bool
    priority: int
    valid_from: dt.date
    valid_to: dt.date
    room_type: str
    currency: str

    @classmethod
    def from_document(cls, document: RateDocument) -> "RateSummary":
        return cls(
            rate_id=document.rate_id,
            supplier_id=document.supplier_id,
            is_master_rate=document.is_master_rate,
            priority=document.priority,
            valid_from=document.valid_from,
            valid_to=document.valid_to,
            room_type=document.room_type,
            currency=document.currency,
        )


class AvailableRatesResponse(BaseModel):
    """Rate documents covering a stay, best first."""

    product_variant_id: str
    check_in: dt.date
    check_out: dt.date
    rates: list[RateSummary]
