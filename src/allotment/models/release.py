"""Release warning models.

A ReleaseWarning is derived from an allocation's start date and release
lead time. It is computed on every query and never persisted.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .enums import ReleaseUrgency


class ReleaseWarning(BaseModel):
    """When an allocation releases and how urgent that is."""

    model_config = ConfigDict(frozen=True)

    release_date: dt.date = Field(..., description="valid_from minus release_days")
    days_until_release: int = Field(
        ..., description="Days from as_of to the release date (negative once passed)"
    )
    urgency: ReleaseUrgency


class InventoryCount(BaseModel):
    """Aggregated inventory row attached to an allocation."""

    total_quantity: int = Field(default=0, ge=0)
    available_quantity: int = Field(default=0, ge=0)
    sold_quantity: int = Field(default=0, ge=0)


class ContractAllocation(BaseModel):
    """An allocation record as read for the release listing."""

    allocation_id: str
    allocation_name: str
    contract_id: str | None = None
    product_id: str | None = None
    valid_from: dt.date
    valid_to: dt.date
    release_days: int | None = Field(default=None, ge=0)
    total_quantity: int = Field(default=0, ge=0)
    total_cost: Decimal | None = None
    cost_per_unit: Decimal | None = None
    currency: str = "EUR"
    is_active: bool = True
    inventory: list[InventoryCount] = Field(default_factory=list)


class ReleaseWarningEntry(BaseModel):
    """One row of the release warning listing."""

    allocation_id: str
    allocation_name: str
    contract_id: str | None = None
    product_id: str | None = None
    valid_from: dt.date
    valid_to: dt.date
    release_days: int
    currency: str = "EUR"
    total_quantity: int
    available_quantity: int
    sold_quantity: int
    cost_per_unit: Decimal
    potential_loss: Decimal
    release_date: dt.date
    days_until_release: int
    urgency: ReleaseUrgency
    recommendations: list[str] = Field(default_factory=list)
