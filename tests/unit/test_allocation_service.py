"""Unit tests for AllocationService."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from allotment.models import AllocationWindow, GenerationResult, InvalidRangeError
from allotment.services.allocations import AllocationService


@pytest.fixture
def repository() -> MagicMock:
    repo = MagicMock()
    repo.save_buckets.side_effect = lambda org, variant, supplier, batch: GenerationResult(
        inserted=len(batch)
    )
    return repo


class TestGenerateBuckets:
    """Tests for AllocationService.generate_buckets."""

    def test_saves_every_day_in_batches(
        self, repository: MagicMock, june_window: AllocationWindow
    ) -> None:
        service = AllocationService(allocations=repository)

        result = service.generate_buckets("org-1", "pv-100", "sup-7", june_window, batch_size=10)

        assert result == GenerationResult(inserted=30, skipped=0)
        assert repository.save_buckets.call_count == 3
        args = repository.save_buckets.call_args_list[0].args
        assert args[:3] == ("org-1", "pv-100", "sup-7")
        assert len(args[3]) == 10

    def test_sums_skipped_counts(self, june_window: AllocationWindow) -> None:
        repo = MagicMock()
        repo.save_buckets.side_effect = lambda org, variant, supplier, batch: GenerationResult(
            skipped=len(batch)
        )
        service = AllocationService(allocations=repo)

        result = service.generate_buckets("org-1", "pv-100", "sup-7", june_window)

        assert result == GenerationResult(inserted=0, skipped=30)

    def test_invalid_window_writes_nothing(self, repository: MagicMock) -> None:
        window = AllocationWindow(valid_from=date(2025, 6, 10), valid_to=date(2025, 6, 1))
        service = AllocationService(allocations=repository)

        with pytest.raises(InvalidRangeError):
            service.generate_buckets("org-1", "pv-100", "sup-7", window)

        repository.save_buckets.assert_not_called()
