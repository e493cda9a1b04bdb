"""Expansion of allocation windows into daily inventory buckets."""

import datetime as dt
from collections.abc import Iterable, Iterator
from decimal import ROUND_HALF_UP, Decimal
from itertools import islice

from allotment.models import (
    AllocationType,
    AllocationWindow,
    DailyBucket,
    InvalidRangeError,
    Limited,
    Quantity,
    Unlimited,
)

# date.weekday(): Monday == 0 ... Sunday == 6
WEEKEND_DAYS = frozenset({5, 6})


def is_weekend(day: dt.date) -> bool:
    return day.weekday() in WEEKEND_DAYS


def date_range(start: dt.date, end: dt.date) -> Iterator[dt.date]:
    """Yield every date from start to end, both inclusive."""
    for offset in range((end - start).days + 1):
        yield start + dt.timedelta(days=offset)


def daily_quantity(window: AllocationWindow, day: dt.date) -> Quantity:
    """Quantity held on a given day of the window.

    Weekend days scale ``default_quantity`` by the weekend multiplier and
    round half-up. Freesale windows are always unlimited.
    """
    if window.allocation_type is AllocationType.FREESALE:
        return Unlimited()

    raw = Decimal(window.default_quantity)
    if is_weekend(day):
        raw *= window.weekend_multiplier
    return Limited(units=int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


class AllocationExpansion:
    """Restartable, lazily generated sequence of daily buckets.

    Each call to ``iter()`` starts a fresh pass over the window; a single
    iterator should not be shared between consumers.
    """

    def __init__(self, window: AllocationWindow) -> None:
        self.window = window

    def __iter__(self) -> Iterator[DailyBucket]:
        for day in date_range(self.window.valid_from, self.window.valid_to):
            yield DailyBucket(date=day, quantity=daily_quantity(self.window, day))

    def __len__(self) -> int:
        return self.window.days


def expand_allocation_window(window: AllocationWindow) -> AllocationExpansion:
    """Expand a window into one DailyBucket per calendar day.

    Args:
        window: Allocation window to expand

    Returns:
        Lazy sequence of buckets from valid_from to valid_to inclusive

    Raises:
        InvalidRangeError: If valid_from is after valid_to
    """
    if window.valid_from > window.valid_to:
        raise InvalidRangeError(
            details={
                "valid_from": window.valid_from.isoformat(),
                "valid_to": window.valid_to.isoformat(),
            }
        )
    return AllocationExpansion(window)


def batched(buckets: Iterable[DailyBucket], size: int) -> Iterator[list[DailyBucket]]:
    """Group buckets into lists of at most ``size`` for bulk writes."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    iterator = iter(buckets)
    while batch := list(islice(iterator, size)):
        yield batch
