"""Pydantic models for allocation, release and pricing data."""

from .allocation import (
    AllocationWindow,
    DailyBucket,
    GenerationResult,
    Limited,
    Quantity,
    Unlimited,
)
from .enums import AllocationType, PricingModel, ReleaseUrgency
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    AllotmentError,
    CurrencyMismatchError,
    DivisionByZeroError,
    ErrorCode,
    ErrorResponse,
    InvalidRangeError,
    NoOccupancyTierError,
    NoRateFoundError,
)
from .rates import (
    MarginBreakdown,
    MarginResult,
    OccupancyTier,
    RateDocument,
    Season,
    StayCostBreakdown,
)
from .release import (
    ContractAllocation,
    InventoryCount,
    ReleaseWarning,
    ReleaseWarningEntry,
)

__all__ = [
    # Enums
    "AllocationType",
    "PricingModel",
    "ReleaseUrgency",
    # Allocation
    "AllocationWindow",
    "DailyBucket",
    "GenerationResult",
    "Limited",
    "Quantity",
    "Unlimited",
    # Rates
    "MarginBreakdown",
    "MarginResult",
    "OccupancyTier",
    "RateDocument",
    "Season",
    "StayCostBreakdown",
    # Release
    "ContractAllocation",
    "InventoryCount",
    "ReleaseWarning",
    "ReleaseWarningEntry",
    # Errors
    "AllotmentError",
    "CurrencyMismatchError",
    "DivisionByZeroError",
    "ErrorCode",
    "ErrorResponse",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "InvalidRangeError",
    "NoOccupancyTierError",
    "NoRateFoundError",
]
