"""Rate resolution and stay cost calculation.

Resolution picks one rate document for a stay and prices its nights in
three parts relative to the document's committed block:

    extra before | block | extra after

Each part is priced with the occupancy tier matching the party size.
All arithmetic stays in Decimal and is not rounded.
"""

import datetime as dt
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from allotment.models import (
    InvalidRangeError,
    NoOccupancyTierError,
    NoRateFoundError,
    OccupancyTier,
    RateDocument,
    StayCostBreakdown,
)
from allotment.utils.logging import get_logger, log_pricing_operation

from .expander import date_range

if TYPE_CHECKING:
    from .repositories import RateRepository

logger = get_logger(__name__)

ZERO = Decimal("0")


def stay_nights(check_in: dt.date, check_out: dt.date) -> list[dt.date]:
    """Nights of a stay; check_out is the departure day and is not a night."""
    return list(date_range(check_in, check_out - dt.timedelta(days=1)))


def _seasons_admit(
    document: RateDocument,
    nights: list[dt.date],
    occupancy: int,
) -> bool:
    """True when every night falls in a season that admits the stay."""
    if not document.seasons:
        return True
    for night in nights:
        if not any(
            season.covers_night(night) and season.admits(len(nights), occupancy)
            for season in document.seasons
        ):
            return False
    return True


def _precedence(document: RateDocument) -> tuple[int, dt.datetime]:
    # Highest priority first, then most recently created
    return (document.priority, document.created_at)


def rank_rate_documents(documents: Iterable[RateDocument]) -> list[RateDocument]:
    """Order documents by priority then recency, best first."""
    return sorted(documents, key=_precedence, reverse=True)


def select_rate_document(
    documents: Iterable[RateDocument],
    variant_id: str,
    supplier_id: str | None,
    check_in: dt.date,
    check_out: dt.date,
    occupancy: int,
    room_type: str = "standard",
) -> RateDocument:
    """Pick the rate document that applies to a stay.

    Args:
        documents: Candidate documents, in any order
        variant_id: Product variant being priced
        supplier_id: Supplier whose rate applies, None for the master rate
        check_in: Arrival date
        check_out: Departure date (exclusive)
        occupancy: Number of guests
        room_type: Room type of the stay

    Returns:
        Highest-priority matching document

    Raises:
        NoRateFoundError: If no document covers the stay
    """
    nights = stay_nights(check_in, check_out)
    candidates = [
        doc
        for doc in documents
        if doc.product_variant_id == variant_id
        and doc.supplier_id == supplier_id
        and doc.room_type == room_type
        and doc.covers_stay(check_in, check_out)
        and _seasons_admit(doc, nights, occupancy)
    ]
    if not candidates:
        raise NoRateFoundError(
            details={
                "variant_id": variant_id,
                "supplier_id": supplier_id or "master",
                "check_in": check_in.isoformat(),
                "check_out": check_out.isoformat(),
            }
        )
    return rank_rate_documents(candidates)[0]


def _partition_nights(
    document: RateDocument,
    nights: list[dt.date],
) -> tuple[int, int, int]:
    """Count nights before, inside and after the committed block."""
    if document.block_start is None and document.block_end is None:
        return 0, len(nights), 0

    block_start = document.block_start or dt.date.min
    block_end = document.block_end or dt.date.max
    before = sum(1 for night in nights if night < block_start)
    after = sum(1 for night in nights if night >= block_end and night >= block_start)
    return before, len(nights) - before - after, after


def _tier_for(tiers: list[OccupancyTier], occupancy: int, document: RateDocument) -> OccupancyTier:
    for tier in tiers:
        if tier.matches(occupancy):
            return tier
    raise NoOccupancyTierError(
        details={"rate_id": document.rate_id, "occupancy": str(occupancy)}
    )


def _price_part(
    document: RateDocument,
    tiers: list[OccupancyTier],
    nights: int,
    occupancy: int,
) -> tuple[Decimal, Decimal]:
    """Nightly rate and cost for one part of the stay; empty parts are free."""
    if nights == 0:
        return ZERO, ZERO
    rate = _tier_for(tiers, occupancy, document).nightly_rate(occupancy)
    return rate, rate * nights


def price_stay(
    document: RateDocument,
    check_in: dt.date,
    check_out: dt.date,
    occupancy: int,
) -> StayCostBreakdown:
    """Price a stay against a single, already selected rate document.

    Raises:
        NoOccupancyTierError: If a non-empty part has no tier for the occupancy
    """
    nights = stay_nights(check_in, check_out)
    before, block, after = _partition_nights(document, nights)
    extra_tiers = document.extra_night_occupancies or document.occupancies

    block_rate, block_cost = _price_part(document, document.occupancies, block, occupancy)
    before_rate, before_cost = _price_part(document, extra_tiers, before, occupancy)
    after_rate, after_cost = _price_part(document, extra_tiers, after, occupancy)

    return StayCostBreakdown(
        rate_id=document.rate_id,
        currency=document.currency,
        total_cost=block_cost + before_cost + after_cost,
        block_nights=block,
        extra_before_nights=before,
        extra_after_nights=after,
        block_cost=block_cost,
        extra_before_cost=before_cost,
        extra_after_cost=after_cost,
        block_rate=block_rate,
        extra_before_rate=before_rate,
        extra_after_rate=after_rate,
    )


def resolve_stay_cost(
    documents: Iterable[RateDocument],
    variant_id: str,
    supplier_id: str | None,
    check_in: dt.date,
    check_out: dt.date,
    occupancy: int,
    room_type: str = "standard",
) -> StayCostBreakdown:
    """Select the applicable rate document and price the stay.

    Raises:
        InvalidRangeError: If check_out is not after check_in
        NoRateFoundError: If no document covers the stay
        NoOccupancyTierError: If the document does not price the occupancy
    """
    if check_out <= check_in:
        raise InvalidRangeError(
            details={"check_in": check_in.isoformat(), "check_out": check_out.isoformat()}
        )
    document = select_rate_document(
        documents, variant_id, supplier_id, check_in, check_out, occupancy, room_type
    )
    return price_stay(document, check_in, check_out, occupancy)


class RateResolver:
    """Service resolving stay costs from a tenant's rate documents."""

    def __init__(self, rates: "RateRepository") -> None:
        """Initialize rate resolver.

        Args:
            rates: Repository supplying rate documents
        """
        self.rates = rates

    def resolve(
        self,
        org_id: str,
        variant_id: str,
        supplier_id: str | None,
        check_in: dt.date,
        check_out: dt.date,
        occupancy: int,
        room_type: str = "standard",
    ) -> StayCostBreakdown:
        """Resolve the cost of a stay.

        Performs a single read of the variant's rate documents, then
        prices the stay without further I/O.

        Args:
            org_id: Tenant owning the rate documents
            variant_id: Product variant being priced
            supplier_id: Supplier whose cost applies, None for the selling price
            check_in: Arrival date
            check_out: Departure date (exclusive)
            occupancy: Number of guests
            room_type: Room type of the stay

        Returns:
            StayCostBreakdown with unrounded amounts
        """
        documents = self.rates.list_rate_documents(org_id, variant_id)
        try:
            breakdown = resolve_stay_cost(
                documents,
                variant_id,
                supplier_id,
                check_in,
                check_out,
                occupancy,
                room_type,
            )
        except (NoRateFoundError, NoOccupancyTierError) as e:
            log_pricing_operation(
                logger,
                "resolve_stay_cost",
                org_id=org_id,
                variant_id=variant_id,
                supplier_id=supplier_id,
                error=e.message,
            )
            raise

        log_pricing_operation(
            logger,
            "resolve_stay_cost",
            org_id=org_id,
            variant_id=variant_id,
            supplier_id=supplier_id,
            rate_id=breakdown.rate_id,
            total_cost=breakdown.total_cost,
            nights=breakdown.nights,
        )
        return breakdown

    def available_rates(
        self,
        org_id: str,
        variant_id: str,
        check_in: dt.date,
        check_out: dt.date,
    ) -> list[RateDocument]:
        """List every rate document covering a stay, best first.

        Includes both supplier and master rates.

        Raises:
            InvalidRangeError: If check_out is not after check_in
        """
        if check_out <= check_in:
            raise InvalidRangeError(
                details={"check_in": check_in.isoformat(), "check_out": check_out.isoformat()}
            )
        documents = self.rates.list_rate_documents(org_id, variant_id)
        return rank_rate_documents(
            doc for doc in documents if doc.covers_stay(check_in, check_out)
        )
