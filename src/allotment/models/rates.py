"""Rate document models and stay pricing results.

Amounts are Decimal and are never rounded here; rounding to the
currency's minor unit happens only when a result is displayed.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .enums import PricingModel

ALL_DAYS_MASK = 0b1111111


class Season(BaseModel):
    """A sub-window of a rate document with its own stay restrictions.

    ``dow_mask`` bit 0 is Monday and bit 6 is Sunday, matching
    ``date.weekday()``.
    """

    season_from: dt.date
    season_to: dt.date
    dow_mask: int = Field(default=ALL_DAYS_MASK, ge=0, le=ALL_DAYS_MASK)
    min_stay: int | None = Field(default=None, ge=0)
    max_stay: int | None = Field(default=None, ge=0)
    min_pax: int | None = Field(default=None, ge=0)
    max_pax: int | None = Field(default=None, ge=0)

    def covers_night(self, night: dt.date) -> bool:
        if not self.season_from <= night <= self.season_to:
            return False
        return bool(self.dow_mask & (1 << night.weekday()))

    def admits(self, nights: int, occupancy: int) -> bool:
        """Check stay length and party size against the season limits."""
        if self.min_stay is not None and nights < self.min_stay:
            return False
        if self.max_stay is not None and nights > self.max_stay:
            return False
        if self.min_pax is not None and occupancy < self.min_pax:
            return False
        if self.max_pax is not None and occupancy > self.max_pax:
            return False
        return True


class OccupancyTier(BaseModel):
    """Nightly price for a band of occupancies."""

    min_occupancy: int = Field(..., ge=1)
    max_occupancy: int = Field(..., ge=1)
    pricing_model: PricingModel = PricingModel.FIXED
    base_amount: Decimal = Field(default=Decimal("0"))
    per_person_amount: Decimal = Field(default=Decimal("0"))

    def matches(self, occupancy: int) -> bool:
        return self.min_occupancy <= occupancy <= self.max_occupancy

    def nightly_rate(self, occupancy: int) -> Decimal:
        if self.pricing_model is PricingModel.BASE_PLUS_PAX:
            return self.base_amount + self.per_person_amount * occupancy
        return self.base_amount


class RateDocument(BaseModel):
    """Pricing rule for a product variant over a validity window.

    A document without ``supplier_id`` is the master (selling) rate.
    ``block_start``/``block_end`` delimit the committed block as a
    half-open range; nights outside it are extra nights and use
    ``extra_night_occupancies`` when those are defined.
    """

    rate_id: str
    product_variant_id: str
    supplier_id: str | None = None
    valid_from: dt.date
    valid_to: dt.date
    priority: int = 100
    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )
    room_type: str = "standard"
    currency: str = "EUR"
    block_start: dt.date | None = None
    block_end: dt.date | None = None
    seasons: list[Season] = Field(default_factory=list)
    occupancies: list[OccupancyTier] = Field(default_factory=list)
    extra_night_occupancies: list[OccupancyTier] = Field(default_factory=list)

    @property
    def is_master_rate(self) -> bool:
        return self.supplier_id is None

    def covers_stay(self, check_in: dt.date, check_out: dt.date) -> bool:
        """True when every night of ``[check_in, check_out)`` is valid."""
        last_night = check_out - dt.timedelta(days=1)
        return self.valid_from <= check_in and last_night <= self.valid_to


class StayCostBreakdown(BaseModel):
    """Cost of a stay split into block and extra nights."""

    rate_id: str
    currency: str = "EUR"
    total_cost: Decimal
    block_nights: int = 0
    extra_before_nights: int = 0
    extra_after_nights: int = 0
    block_cost: Decimal = Decimal("0")
    extra_before_cost: Decimal = Decimal("0")
    extra_after_cost: Decimal = Decimal("0")
    block_rate: Decimal = Decimal("0")
    extra_before_rate: Decimal = Decimal("0")
    extra_after_rate: Decimal = Decimal("0")

    @property
    def nights(self) -> int:
        return self.block_nights + self.extra_before_nights + self.extra_after_nights


class MarginBreakdown(BaseModel):
    """Both sides of a margin calculation."""

    model_config = ConfigDict(frozen=True)

    supplier: StayCostBreakdown
    master: StayCostBreakdown


class MarginResult(BaseModel):
    """Supplier cost against selling price for the same stay."""

    supplier_cost: Decimal
    selling_price: Decimal
    margin: Decimal
    margin_percentage: Decimal
    breakdown: MarginBreakdown
