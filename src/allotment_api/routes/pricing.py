"""Pricing endpoints for stay cost, margin and rate lookup.

Provides REST endpoints for:
- Stay cost calculation against supplier or master rates
- Margin between supplier cost and selling price
- Rate documents covering a stay

Amounts are decimal strings rounded to the currency's minor unit.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from allotment.services.margin import MarginCalculator
from allotment.services.rates import RateResolver
from allotment_api.dependencies import get_margin_calculator, get_org_id, get_rate_resolver
from allotment_api.models.pricing import (
    AvailableRatesResponse,
    MarginRequest,
    MarginResponse,
    RateSummary,
    StayCostResponse,
    StayPricingRequest,
)

router = APIRouter(tags=["pricing"])


@router.post(
    "/pricing/calculate",
    summary="Calculate stay cost",
    description="""
Calculate the cost of a stay from the applicable rate document.

The highest-priority rate covering the stay is used. Nights are split into
block nights (inside the contracted block) and extra nights before/after it.

**Notes:**
- check_out is exclusive (last night is check_out - 1 day)
- Omit supplier_id to price with the master (selling) rate
""",
    response_description="Stay cost breakdown",
    response_model=StayCostResponse,
    responses={
        400: {"description": "check_out is not after check_in"},
        404: {"description": "Pricing unavailable for these dates"},
        422: {"description": "This occupancy is not priced"},
    },
)
async def calculate_stay_cost(
    request: StayPricingRequest,
    org_id: str = Depends(get_org_id),
    resolver: RateResolver = Depends(get_rate_resolver),
) -> StayCostResponse:
    """Calculate the cost of a stay."""
    breakdown = resolver.resolve(
        org_id,
        request.product_variant_id,
        request.supplier_id,
        request.check_in,
        request.check_out,
        request.occupancy,
        request.room_type,
    )
    return StayCostResponse.from_breakdown(breakdown)


@router.post(
    "/pricing/margin",
    summary="Calculate margin",
    description="""
Compare a supplier's cost with the master selling price for the same stay.

margin_percentage is the margin over the selling price, in percent.
""",
    response_description="Margin with both cost breakdowns",
    response_model=MarginResponse,
    responses={
        400: {"description": "check_out is not after check_in"},
        404: {"description": "Pricing unavailable for these dates"},
        422: {"description": "Occupancy not priced, or margin cannot be computed"},
    },
)
async def calculate_margin(
    request: MarginRequest,
    org_id: str = Depends(get_org_id),
    calculator: MarginCalculator = Depends(get_margin_calculator),
) -> MarginResponse:
    """Calculate the margin of a stay."""
    result = calculator.calculate_margin(
        org_id,
        request.product_variant_id,
        request.supplier_id,
        request.check_in,
        request.check_out,
        request.occupancy,
        request.room_type,
    )
    return MarginResponse.from_result(result)


@router.get(
    "/pricing/rates",
    summary="List rates covering a stay",
    description="""
List every rate document (supplier and master) covering a stay,
ordered by priority, then most recently created.
""",
    response_description="Rate documents covering the stay",
    response_model=AvailableRatesResponse,
    responses={400: {"description": "check_out is not after check_in"}},
)
async def get_available_rates(
    product_variant_id: str = Query(..., min_length=1, description="Product variant id"),
    check_in: dt.date = Query(..., description="Arrival date (YYYY-MM-DD)"),
    check_out: dt.date = Query(..., description="Departure date (YYYY-MM-DD)"),
    org_id: str = Depends(get_org_id),
    resolver: RateResolver = Depends(get_rate_resolver),
) -> AvailableRatesResponse:
    """List rate documents covering a stay."""
    documents = resolver.available_rates(org_id, product_variant_id, check_in, check_out)
    return AvailableRatesResponse(
        product_variant_id=product_variant_id,
        check_in=check_in,
        check_out=check_out,
        rates=[RateSummary.from_document(doc) for doc in documents],
    )
