"""FastAPI application for the allotment REST API.

This package provides REST endpoints for:
- Health checks
- Stay pricing and margins
- Allocation inventory generation and release warnings
"""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from allotment.utils.logging import configure_logging, get_logger
from allotment_api import __version__
from allotment_api.exceptions import register_exception_handlers
from allotment_api.middleware import CorrelationIdMiddleware
from allotment_api.routes import allocations_router, health_router, pricing_router

configure_logging()
logger = get_logger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def _cors_origins() -> list[str]:
    raw = os.getenv("ALLOTMENT_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Allotment API",
    description="REST API for allocation inventory and rate pricing",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.include_router(health_router, prefix="/api")
app.include_router(pricing_router, prefix="/api")
app.include_router(allocations_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "allotment-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(reload: bool = True) -> None:
    """Serve the API locally with uvicorn.

    Binds to ALLOTMENT_HOST:ALLOTMENT_PORT (default 127.0.0.1:8080).
    """
    import uvicorn

    host = os.getenv("ALLOTMENT_HOST", "127.0.0.1")
    port = int(os.getenv("ALLOTMENT_PORT", "8080"))
    logger.info("Starting allotment API | host=%s | port=%d | reload=%s", host, port, reload)
    # reload needs an import string rather than the app object
    target = "allotment_api.main:app" if reload else app
    uvicorn.run(target, host=host, port=port, reload=reload)


if __name__ == "__main__":
    run_server()
