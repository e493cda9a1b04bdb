"""Allocation service for generating daily inventory."""

from typing import TYPE_CHECKING

from allotment.models import AllocationWindow, GenerationResult
from allotment.utils.logging import get_logger, log_allocation_operation

from .expander import batched, expand_allocation_window

if TYPE_CHECKING:
    from .repositories import AllocationRepository

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 25


class AllocationService:
    """Service turning allocation windows into persisted daily buckets."""

    def __init__(self, allocations: "AllocationRepository") -> None:
        """Initialize allocation service.

        Args:
            allocations: Repository persisting buckets
        """
        self.allocations = allocations

    def generate_buckets(
        self,
        org_id: str,
        variant_id: str,
        supplier_id: str,
        window: AllocationWindow,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> GenerationResult:
        """Expand a window and persist its buckets batch by batch.

        Buckets are produced lazily, so the whole range is never held in
        memory. Days that already have a bucket are skipped.

        Args:
            org_id: Tenant id
            variant_id: Product variant the allocation is for
            supplier_id: Supplier holding the allocation
            window: Allocation window to expand
            batch_size: Buckets written per batch

        Returns:
            Counts of inserted and skipped buckets

        Raises:
            InvalidRangeError: If the window starts after it ends
        """
        expansion = expand_allocation_window(window)
        inserted = skipped = 0

        for batch in batched(expansion, batch_size):
            result = self.allocations.save_buckets(org_id, variant_id, supplier_id, batch)
            inserted += result.inserted
            skipped += result.skipped

        log_allocation_operation(
            logger,
            "generate_buckets",
            org_id=org_id,
            variant_id=variant_id,
            supplier_id=supplier_id,
            inserted=inserted,
            skipped=skipped,
            days=len(expansion),
        )
        return GenerationResult(inserted=inserted, skipped=skipped)
