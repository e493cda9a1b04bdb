"""Unit tests for release urgency and the release warning listing.

Tests cover the tier boundaries (3 / 7 / 30 days), the listing window
(-1 to 30 days, units still available) and the inventory roll-up.
"""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from allotment.models import (
    ContractAllocation,
    InventoryCount,
    ReleaseUrgency,
    ReleaseWarning,
)
from allotment.services.release import (
    ReleaseWarningService,
    build_release_warnings,
    classify_release_urgency,
    include_in_release_listing,
    release_recommendations,
    urgency_for_days,
)

AS_OF = date(2025, 1, 1)


def make_allocation(
    allocation_id: str = "alloc-1",
    release_in_days: int = 5,
    release_days: int | None = 14,
    **overrides,
) -> ContractAllocation:
    """Allocation whose release date is release_in_days after AS_OF."""
    valid_from = AS_OF + timedelta(days=release_in_days + (release_days or 0))
    data = {
        "allocation_id": allocation_id,
        "allocation_name": f"Allocation {allocation_id}",
        "valid_from": valid_from,
        "valid_to": valid_from + timedelta(days=6),
        "release_days": release_days,
        "total_quantity": 10,
        "cost_per_unit": Decimal("100"),
    }
    data.update(overrides)
    return ContractAllocation(**data)


class TestUrgencyTiers:
    """Tests for tier boundaries."""

    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            (-1, ReleaseUrgency.CRITICAL),
            (0, ReleaseUrgency.CRITICAL),
            (3, ReleaseUrgency.CRITICAL),
            (4, ReleaseUrgency.URGENT),
            (7, ReleaseUrgency.URGENT),
            (8, ReleaseUrgency.WARNING),
            (30, ReleaseUrgency.WARNING),
            (31, ReleaseUrgency.SAFE),
        ],
    )
    def test_boundaries(self, days: int, expected: ReleaseUrgency) -> None:
        assert urgency_for_days(days) == expected


class TestClassifyReleaseUrgency:
    """Tests for classify_release_urgency."""

    def test_release_date_is_valid_from_minus_lead_time(self) -> None:
        warning = classify_release_urgency(date(2025, 1, 17), 14, AS_OF)

        assert warning is not None
        assert warning.release_date == date(2025, 1, 3)
        assert warning.days_until_release == 2
        assert warning.urgency == ReleaseUrgency.CRITICAL

    def test_urgent_release(self) -> None:
        warning = classify_release_urgency(date(2025, 1, 7), 0, AS_OF)

        assert warning is not None
        assert warning.days_until_release == 6
        assert warning.urgency == ReleaseUrgency.URGENT

    def test_warning_release(self) -> None:
        warning = classify_release_urgency(date(2025, 1, 20), 0, AS_OF)

        assert warning is not None
        assert warning.urgency == ReleaseUrgency.WARNING

    def test_safe_release(self) -> None:
        warning = classify_release_urgency(date(2025, 3, 1), 0, AS_OF)

        assert warning is not None
        assert warning.urgency == ReleaseUrgency.SAFE

    def test_past_release_is_negative(self) -> None:
        warning = classify_release_urgency(date(2025, 1, 10), 10, AS_OF)

        assert warning is not None
        assert warning.days_until_release == -1
        assert warning.urgency == ReleaseUrgency.CRITICAL

    def test_no_policy_returns_none(self) -> None:
        assert classify_release_urgency(date(2025, 1, 10), None, AS_OF) is None

    def test_negative_lead_time_rejected(self) -> None:
        with pytest.raises(ValueError):
            classify_release_urgency(date(2025, 1, 10), -1, AS_OF)

    def test_defaults_to_today(self) -> None:
        warning = classify_release_urgency(date.today(), 0)

        assert warning is not None
        assert warning.days_until_release == 0


class TestIncludeInReleaseListing:
    """Tests for the listing filter."""

    def _warning(self, days: int) -> ReleaseWarning:
        return ReleaseWarning(
            release_date=AS_OF + timedelta(days=days),
            days_until_release=days,
            urgency=urgency_for_days(days),
        )

    @pytest.mark.parametrize("days", [-1, 0, 15, 30])
    def test_included_inside_window(self, days: int) -> None:
        assert include_in_release_listing(self._warning(days), available_quantity=1)

    @pytest.mark.parametrize("days", [-2, 31])
    def test_excluded_outside_window(self, days: int) -> None:
        assert not include_in_release_listing(self._warning(days), available_quantity=1)

    def test_excluded_when_sold_out(self) -> None:
        assert not include_in_release_listing(self._warning(5), available_quantity=0)


class TestReleaseRecommendations:
    """Tests for recommended actions."""

    def test_critical(self) -> None:
        recs = release_recommendations(ReleaseUrgency.CRITICAL, Decimal("80"), Decimal("100"))

        assert recs[0] == "URGENT: Contact supplier immediately"
        assert len(recs) == 3

    def test_urgent_with_low_utilization_suggests_price_cut(self) -> None:
        recs = release_recommendations(ReleaseUrgency.URGENT, Decimal("20"), Decimal("100"))
        assert "Reduce prices to accelerate sales" in recs

    def test_urgent_with_high_utilization_skips_price_cut(self) -> None:
        recs = release_recommendations(ReleaseUrgency.URGENT, Decimal("70"), Decimal("100"))
        assert "Reduce prices to accelerate sales" not in recs

    def test_warning_with_low_utilization_suggests_promotion(self) -> None:
        recs = release_recommendations(ReleaseUrgency.WARNING, Decimal("10"), Decimal("100"))
        assert "Consider promotional pricing" in recs

    def test_high_potential_loss_flagged(self) -> None:
        recs = release_recommendations(ReleaseUrgency.SAFE, Decimal("0"), Decimal("60000"))
        assert recs == ["High financial risk - prioritize resolution"]


class TestBuildReleaseWarnings:
    """Tests for the release warning listing."""

    def test_sorted_soonest_first(self) -> None:
        allocations = [
            make_allocation("late", release_in_days=20),
            make_allocation("soon", release_in_days=1),
            make_allocation("mid", release_in_days=6),
        ]
        entries = build_release_warnings(allocations, AS_OF)

        assert [e.allocation_id for e in entries] == ["soon", "mid", "late"]
        assert [e.urgency for e in entries] == [
            ReleaseUrgency.CRITICAL,
            ReleaseUrgency.URGENT,
            ReleaseUrgency.WARNING,
        ]

    def test_skips_inactive_and_policy_less(self) -> None:
        allocations = [
            make_allocation("inactive", is_active=False),
            make_allocation("no-policy", release_days=None),
            make_allocation("kept"),
        ]
        entries = build_release_warnings(allocations, AS_OF)

        assert [e.allocation_id for e in entries] == ["kept"]

    def test_skips_outside_window(self) -> None:
        allocations = [
            make_allocation("far", release_in_days=45),
            make_allocation("long-gone", release_in_days=-5),
        ]
        assert build_release_warnings(allocations, AS_OF) == []

    def test_rolls_up_inventory(self) -> None:
        allocation = make_allocation(
            cost_per_unit=None,
            total_cost=Decimal("1000"),
            inventory=[
                InventoryCount(total_quantity=6, available_quantity=2, sold_quantity=4),
                InventoryCount(total_quantity=4, available_quantity=2, sold_quantity=2),
            ],
        )
        [entry] = build_release_warnings([allocation], AS_OF)

        assert entry.total_quantity == 10
        assert entry.available_quantity == 4
        assert entry.sold_quantity == 6
        assert entry.cost_per_unit == Decimal("100")
        assert entry.potential_loss == Decimal("400")

    def test_falls_back_to_allocation_totals(self) -> None:
        allocation = make_allocation(total_quantity=20, cost_per_unit=Decimal("50"))
        [entry] = build_release_warnings([allocation], AS_OF)

        assert entry.total_quantity == 20
        assert entry.available_quantity == 20
        assert entry.sold_quantity == 0
        assert entry.potential_loss == Decimal("1000")

    def test_sold_out_allocation_excluded(self) -> None:
        allocation = make_allocation(
            inventory=[InventoryCount(total_quantity=5, available_quantity=0, sold_quantity=5)],
        )
        assert build_release_warnings([allocation], AS_OF) == []


class TestReleaseWarningService:
    """Tests for ReleaseWarningService."""

    def test_lists_active_allocations_for_tenant(self) -> None:
        repository = MagicMock()
        repository.list_allocations.return_value = [make_allocation("a1", release_in_days=2)]
        service = ReleaseWarningService(allocations=repository)

        warnings = service.list_release_warnings("org-1", AS_OF)

        repository.list_allocations.assert_called_once_with("org-1", active_only=True)
        assert len(warnings) == 1
        assert warnings[0].allocation_id == "a1"
        assert warnings[0].days_until_release == 2
