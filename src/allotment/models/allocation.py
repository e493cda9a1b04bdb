"""Allocation window and daily inventory bucket models."""

import datetime as dt
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import AllocationType


class Limited(BaseModel):
    """A capped daily quantity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["limited"] = "limited"
    units: int = Field(..., ge=0, description="Units held for the day")

    @property
    def is_unlimited(self) -> bool:
        return False


class Unlimited(BaseModel):
    """No daily cap (freesale inventory)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unlimited"] = "unlimited"

    @property
    def is_unlimited(self) -> bool:
        return True


Quantity = Annotated[Union[Limited, Unlimited], Field(discriminator="kind")]


class AllocationWindow(BaseModel):
    """A supplier commitment to hold inventory over a date span.

    ``valid_to`` is inclusive. The ``valid_from <= valid_to`` invariant is
    checked when the window is expanded so that callers always get an
    InvalidRangeError rather than a validation error.
    """

    valid_from: dt.date = Field(..., description="First day of the window")
    valid_to: dt.date = Field(..., description="Last day of the window (inclusive)")
    default_quantity: int = Field(default=0, ge=0, description="Units per weekday")
    weekend_multiplier: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        description="Factor applied to default_quantity on Saturdays and Sundays",
    )
    allocation_type: AllocationType = Field(
        default=AllocationType.COMMITTED,
        description="Inventory model of the allocation",
    )

    @property
    def days(self) -> int:
        """Number of calendar days covered (0 for an inverted window)."""
        return max(0, (self.valid_to - self.valid_from).days + 1)


class DailyBucket(BaseModel):
    """Inventory for a single calendar day."""

    date: dt.date
    quantity: Quantity
    booked: int = Field(default=0, ge=0)
    held: int = Field(default=0, ge=0)
    stop_sell: bool = False
    blackout: bool = False

    @property
    def is_sellable(self) -> bool:
        """True when the day can still take a booking."""
        if self.stop_sell or self.blackout:
            return False
        if isinstance(self.quantity, Unlimited):
            return True
        return self.quantity.units - self.booked - self.held > 0


class GenerationResult(BaseModel):
    """Outcome of persisting an expanded allocation window."""

    inserted: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
