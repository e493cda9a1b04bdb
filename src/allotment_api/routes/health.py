"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter

from allotment_api import __version__

router = APIRouter(tags=["health"])


@router.get("/health", summary="Service health")
async def health() -> dict[str, Any]:
    """Report service status and version."""
    return {"status": "healthy", "version": __version__}
