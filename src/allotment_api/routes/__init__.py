"""API routes package.

Routers are organized by domain:

- health: Health check endpoints
- pricing: Stay cost, margin and rate lookup
- allocations: Daily inventory generation and release warnings

All routers are registered in main.py with /api prefix.
"""

from allotment_api.routes.allocations import router as allocations_router
from allotment_api.routes.health import router as health_router
from allotment_api.routes.pricing import router as pricing_router

__all__ = [
    "allocations_router",
    "health_router",
    "pricing_router",
]
