"""Standard error codes for the allocation and pricing core.

Every domain failure raised by the library is an AllotmentError subclass
carrying one of these codes, so callers (API routes, server actions) can
translate it without string matching.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes for allocation and pricing failures."""

    # Allocation error codes
    INVALID_RANGE = "ERR_RANGE_001"

    # Rate resolution error codes
    NO_RATE_FOUND = "ERR_RATE_001"
    NO_OCCUPANCY_TIER = "ERR_RATE_002"

    # Margin error codes
    DIVISION_BY_ZERO = "ERR_MARGIN_001"
    CURRENCY_MISMATCH = "ERR_MARGIN_002"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_RANGE: "The start date must not be after the end date",
    ErrorCode.NO_RATE_FOUND: "Pricing unavailable for these dates",
    ErrorCode.NO_OCCUPANCY_TIER: "This occupancy is not priced",
    ErrorCode.DIVISION_BY_ZERO: "Margin cannot be computed",
    ErrorCode.CURRENCY_MISMATCH: "Supplier and selling rates use different currencies",
}

# Recovery suggestions for callers
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_RANGE: "Swap or correct the dates and try again",
    ErrorCode.NO_RATE_FOUND: "Create a rate document covering the requested stay",
    ErrorCode.NO_OCCUPANCY_TIER: "Add an occupancy tier for this number of guests",
    ErrorCode.DIVISION_BY_ZERO: "Check the master rate; the selling price resolves to zero",
    ErrorCode.CURRENCY_MISMATCH: "Align the supplier and master rate currencies for this variant",
}


class ErrorResponse(BaseModel):
    """Standard error body returned for domain failures."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class AllotmentError(Exception):
    """Base exception for allocation and pricing failures.

    Subclasses fix the error code; callers may catch the base class and
    convert it to an ErrorResponse.
    """

    code: ErrorCode

    def __init__(self, details: Optional[dict[str, str]] = None):
        self.message = ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)


class InvalidRangeError(AllotmentError):
    """Start date after end date (or an empty stay)."""

    code = ErrorCode.INVALID_RANGE


class NoRateFoundError(AllotmentError):
    """No rate document covers the variant/date/supplier combination."""

    code = ErrorCode.NO_RATE_FOUND


class NoOccupancyTierError(AllotmentError):
    """A rate document matched but none of its tiers covers the occupancy."""

    code = ErrorCode.NO_OCCUPANCY_TIER


class DivisionByZeroError(AllotmentError):
    """Selling price resolved to zero while computing a margin percentage."""

    code = ErrorCode.DIVISION_BY_ZERO


class CurrencyMismatchError(AllotmentError):
    """Supplier cost and selling price are priced in different currencies."""

    code = ErrorCode.CURRENCY_MISMATCH
