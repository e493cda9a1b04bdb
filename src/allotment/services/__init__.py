"""Allocation and pricing services."""

from .allocations import AllocationService
from .dynamodb import DynamoDBService, get_dynamodb_service
from .expander import expand_allocation_window
from .margin import MarginCalculator, compute_margin
from .rates import RateResolver, resolve_stay_cost
from .release import (
    ReleaseWarningService,
    build_release_warnings,
    classify_release_urgency,
    include_in_release_listing,
)
from .repositories import AllocationRepository, RateRepository

__all__ = [
    "AllocationRepository",
    "AllocationService",
    "DynamoDBService",
    "MarginCalculator",
    "RateRepository",
    "RateResolver",
    "ReleaseWarningService",
    "build_release_warnings",
    "classify_release_urgency",
    "compute_margin",
    "expand_allocation_window",
    "get_dynamodb_service",
    "include_in_release_listing",
    "resolve_stay_cost",
]
