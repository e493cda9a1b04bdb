"""Allocation endpoints for inventory generation and release warnings."""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from allotment.models import ReleaseUrgency
from allotment.services.allocations import AllocationService
from allotment.services.release import ReleaseWarningService
from allotment_api.dependencies import (
    get_allocation_service,
    get_org_id,
    get_release_warning_service,
)
from allotment_api.models.allocations import (
    GenerateBucketsRequest,
    GenerateBucketsResponse,
    ReleaseWarningResponse,
    ReleaseWarningsResponse,
)

router = APIRouter(tags=["allocations"])


@router.post(
    "/allocations/generate",
    summary="Generate daily inventory",
    description="""
Expand an allocation window into one inventory bucket per day.

Weekend days scale the default quantity by weekend_multiplier (rounded
half-up). Freesale allocations get unlimited buckets. Days that already
have a bucket are skipped, so the call can be repeated safely.
""",
    response_description="Inserted and skipped bucket counts",
    response_model=GenerateBucketsResponse,
    responses={400: {"description": "valid_from is after valid_to"}},
)
async def generate_buckets(
    request: GenerateBucketsRequest,
    org_id: str = Depends(get_org_id),
    service: AllocationService = Depends(get_allocation_service),
) -> GenerateBucketsResponse:
    """Generate daily buckets for an allocation window."""
    window = request.to_window()
    result = service.generate_buckets(
        org_id, request.product_variant_id, request.supplier_id, window
    )
    return GenerateBucketsResponse(
        days=window.days,
        inserted=result.inserted,
        skipped=result.skipped,
    )


@router.get(
    "/allocations/release-warnings",
    summary="List release warnings",
    description="""
List active allocations whose release date is between yesterday and 30
days ahead and that still have units available, soonest first.
""",
    response_description="Release warnings with urgency and recommendations",
    response_model=ReleaseWarningsResponse,
)
async def list_release_warnings(
    as_of: dt.date | None = Query(
        default=None, description="Reference date (YYYY-MM-DD), defaults to today"
    ),
    org_id: str = Depends(get_org_id),
    service: ReleaseWarningService = Depends(get_release_warning_service),
) -> ReleaseWarningsResponse:
    """List allocations approaching release."""
    reference = as_of or dt.date.today()
    warnings = service.list_release_warnings(org_id, reference)
    return ReleaseWarningsResponse(
        as_of=reference,
        warnings=[ReleaseWarningResponse.from_entry(w) for w in warnings],
        total_count=len(warnings),
        critical_count=sum(1 for w in warnings if w.urgency is ReleaseUrgency.CRITICAL),
    )
