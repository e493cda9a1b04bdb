"""Enumeration types for allotment data models."""

from enum import Enum


class AllocationType(str, Enum):
    """Inventory model agreed with the supplier for an allocation."""

    COMMITTED = "committed"
    FREESALE = "freesale"
    ON_REQUEST = "on_request"


class PricingModel(str, Enum):
    """How an occupancy tier turns into a nightly rate."""

    FIXED = "fixed"
    BASE_PLUS_PAX = "base_plus_pax"


class ReleaseUrgency(str, Enum):
    """Urgency tier of an upcoming allocation release."""

    CRITICAL = "critical"
    URGENT = "urgent"
    WARNING = "warning"
    SAFE = "safe"
