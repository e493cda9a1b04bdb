"""API models for allocation endpoints.

Release warning amounts are rounded to the currency's minor unit here.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from allotment.models import AllocationType, AllocationWindow, ReleaseWarningEntry
from allotment.utils.money import round_money


class GenerateBucketsRequest(BaseModel):
    """Allocation window to expand into daily buckets."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "product_variant_id": "pv-100",
                    "supplier_id": "sup-7",
                    "valid_from": "2025-06-01",
                    "valid_to": "2025-06-30",
                    "default_quantity": 8,
                    "weekend_multiplier": 1.5,
                    "allocation_type": "committed",
                }
            ]
        }
    )

    product_variant_id: str = Field(..., min_length=1)
    supplier_id: str = Field(..., min_length=1)
    valid_from: dt.date
    valid_to: dt.date
    default_quantity: int = Field(default=0, ge=0)
    weekend_multiplier: Decimal = Field(default=Decimal("1"), ge=0)
    allocation_type: AllocationType = AllocationType.COMMITTED

    def to_window(self) -> AllocationWindow:
        return AllocationWindow(
            valid_from=self.valid_from,
            valid_to=self.valid_to,
            default_quantity=self.default_quantity,
            weekend_multiplier=self.weekend_multiplier,
            allocation_type=self.allocation_type,
        )


class GenerateBucketsResponse(BaseModel):
    """Outcome of a bucket generation run."""

    days: int = Field(..., description="Days covered by the window")
    inserted: int = Field(..., description="Buckets created")
    skipped: int = Field(..., description="Days that already had a bucket")


class ReleaseWarningResponse(ReleaseWarningEntry):
    """Release warning with display-rounded amounts."""

    @classmethod
    def from_entry(cls, entry: ReleaseWarningEntry) -> "ReleaseWarningResponse":
        data = entry.model_dump()
        data["cost_per_unit"] = round_money(entry.cost_per_unit, entry.currency)
        data["potential_loss"] = round_money(entry.potential_loss, entry.currency)
        return cls(**data)


class ReleaseWarningsResponse(BaseModel):
    """Allocations approaching their release date, soonest first."""

    as_of: dt.date
    warnings: list[ReleaseWarningResponse]
    total_count: int
    critical_count: int
