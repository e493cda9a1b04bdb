"""Release urgency classification and the release warning listing.

Urgency tiers (days until the release date, first match wins):
- CRITICAL: 3 days or fewer
- URGENT: 4-7 days
- WARNING: 8-30 days
- SAFE: more than 30 days

The listing keeps allocations whose release date is at most one day in
the past and at most 30 days ahead, and that still have units to sell.
"""

import datetime as dt
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from allotment.models import (
    ContractAllocation,
    ReleaseUrgency,
    ReleaseWarning,
    ReleaseWarningEntry,
)
from allotment.utils.logging import get_logger

if TYPE_CHECKING:
    from .repositories import AllocationRepository

logger = get_logger(__name__)

# Tier thresholds (days until release, inclusive upper bounds)
CRITICAL_DAYS = 3
URGENT_DAYS = 7
WARNING_DAYS = 30

# Listing window
LISTING_MIN_DAYS = -1
LISTING_MAX_DAYS = 30

HIGH_RISK_LOSS = Decimal("50000")


def urgency_for_days(days_until_release: int) -> ReleaseUrgency:
    """Bucket a day count into an urgency tier."""
    if days_until_release <= CRITICAL_DAYS:
        return ReleaseUrgency.CRITICAL
    if days_until_release <= URGENT_DAYS:
        return ReleaseUrgency.URGENT
    if days_until_release <= WARNING_DAYS:
        return ReleaseUrgency.WARNING
    return ReleaseUrgency.SAFE


def classify_release_urgency(
    valid_from: dt.date,
    release_days: int | None,
    as_of: dt.date | None = None,
) -> ReleaseWarning | None:
    """Compute the release date of an allocation and its urgency.

    Args:
        valid_from: First day of the allocation
        release_days: Lead time in days; None means no release policy
        as_of: Reference date, defaults to today

    Returns:
        ReleaseWarning, or None when there is no release policy

    Raises:
        ValueError: If release_days is negative
    """
    if release_days is None:
        return None
    if release_days < 0:
        raise ValueError("release_days must not be negative")

    as_of = as_of or dt.date.today()
    release_date = valid_from - dt.timedelta(days=release_days)
    days_until_release = (release_date - as_of).days

    return ReleaseWarning(
        release_date=release_date,
        days_until_release=days_until_release,
        urgency=urgency_for_days(days_until_release),
    )


def include_in_release_listing(warning: ReleaseWarning, available_quantity: int) -> bool:
    """Whether a warning belongs in the release listing.

    Args:
        warning: Classified release warning
        available_quantity: Unsold units, supplied by the caller

    Returns:
        True if released at most a day ago, due within 30 days, and not sold out
    """
    return (
        LISTING_MIN_DAYS <= warning.days_until_release <= LISTING_MAX_DAYS
        and available_quantity > 0
    )


def release_recommendations(
    urgency: ReleaseUrgency,
    utilization_rate: Decimal,
    potential_loss: Decimal,
) -> list[str]:
    """Suggested actions for an allocation approaching release."""
    recommendations: list[str] = []

    if urgency is ReleaseUrgency.CRITICAL:
        recommendations.append("URGENT: Contact supplier immediately")
        recommendations.append("Consider emergency price reduction")
        recommendations.append("Alert sales team for last-minute push")
    elif urgency is ReleaseUrgency.URGENT:
        recommendations.append("Schedule supplier call this week")
        if utilization_rate < 50:
            recommendations.append("Reduce prices to accelerate sales")
        recommendations.append("Send urgent alert to sales team")
    elif urgency is ReleaseUrgency.WARNING:
        recommendations.append("Monitor daily and prepare action plan")
        if utilization_rate < 30:
            recommendations.append("Consider promotional pricing")
        recommendations.append("Weekly sales team reminder")

    if potential_loss > HIGH_RISK_LOSS:
        recommendations.append("High financial risk - prioritize resolution")

    return recommendations


def _warning_entry(
    allocation: ContractAllocation,
    warning: ReleaseWarning,
) -> ReleaseWarningEntry:
    """Roll inventory up for one allocation and attach its warning."""
    inventory_total = sum(inv.total_quantity for inv in allocation.inventory)

    # Allocation totals stand in until inventory rows have been generated
    if inventory_total > 0:
        total_quantity = inventory_total
        available_quantity = sum(inv.available_quantity for inv in allocation.inventory)
        sold_quantity = sum(inv.sold_quantity for inv in allocation.inventory)
    else:
        total_quantity = allocation.total_quantity
        available_quantity = allocation.total_quantity
        sold_quantity = 0

    if allocation.cost_per_unit is not None:
        cost_per_unit = allocation.cost_per_unit
    elif allocation.total_cost is not None and allocation.total_quantity:
        cost_per_unit = allocation.total_cost / allocation.total_quantity
    else:
        cost_per_unit = Decimal("0")

    potential_loss = available_quantity * cost_per_unit
    utilization_rate = (
        Decimal(sold_quantity) / total_quantity * 100 if total_quantity else Decimal("0")
    )

    return ReleaseWarningEntry(
        allocation_id=allocation.allocation_id,
        allocation_name=allocation.allocation_name,
        contract_id=allocation.contract_id,
        product_id=allocation.product_id,
        valid_from=allocation.valid_from,
        valid_to=allocation.valid_to,
        release_days=allocation.release_days or 0,
        currency=allocation.currency,
        total_quantity=total_quantity,
        available_quantity=available_quantity,
        sold_quantity=sold_quantity,
        cost_per_unit=cost_per_unit,
        potential_loss=potential_loss,
        release_date=warning.release_date,
        days_until_release=warning.days_until_release,
        urgency=warning.urgency,
        recommendations=release_recommendations(
            warning.urgency,
            utilization_rate,
            potential_loss,
        ),
    )


def build_release_warnings(
    allocations: Iterable[ContractAllocation],
    as_of: dt.date | None = None,
) -> list[ReleaseWarningEntry]:
    """Build the release warning listing for a set of allocations.

    Inactive allocations and allocations without a release policy are
    skipped. The result is sorted by days until release, soonest first.
    """
    as_of = as_of or dt.date.today()
    entries: list[ReleaseWarningEntry] = []

    for allocation in allocations:
        if not allocation.is_active:
            continue
        warning = classify_release_urgency(
            allocation.valid_from, allocation.release_days, as_of
        )
        if warning is None:
            continue

        entry = _warning_entry(allocation, warning)
        if include_in_release_listing(warning, entry.available_quantity):
            entries.append(entry)

    return sorted(entries, key=lambda e: e.days_until_release)


class ReleaseWarningService:
    """Service listing allocations that are about to release."""

    def __init__(self, allocations: "AllocationRepository") -> None:
        """Initialize release warning service.

        Args:
            allocations: Repository supplying allocation records
        """
        self.allocations = allocations

    def list_release_warnings(
        self,
        org_id: str,
        as_of: dt.date | None = None,
    ) -> list[ReleaseWarningEntry]:
        """List release warnings for a tenant.

        Args:
            org_id: Tenant to list allocations for
            as_of: Reference date, defaults to today

        Returns:
            Warnings sorted by days until release
        """
        records = self.allocations.list_allocations(org_id, active_only=True)
        warnings = build_release_warnings(records, as_of)
        logger.info(
            "Release warnings built | org_id=%s | allocations=%d | warnings=%d",
            org_id,
            len(records),
            len(warnings),
        )
        return warnings
