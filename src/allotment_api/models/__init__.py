"""API-specific request/response models.

Domain models (RateDocument, DailyBucket, ReleaseWarningEntry, ...) live
in allotment.models and are reused here where appropriate.

Modules:
- pricing: Stay cost, margin and available-rate models
- allocations: Bucket generation and release warning models
"""

__all__: list[str] = []
