"""FastAPI exception handlers for converting AllotmentError to HTTP responses.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Invalid input (inverted date ranges)
- 404 Not Found: No rate document covers the request
- 422 Unprocessable Entity: A rate exists but cannot price the request

Usage:
    from allotment_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
)

from allotment.models.errors import AllotmentError, ErrorCode
from allotment.utils.logging import get_logger

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_RANGE: HTTP_400_BAD_REQUEST,
    ErrorCode.NO_RATE_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.NO_OCCUPANCY_TIER: 422,
    ErrorCode.DIVISION_BY_ZERO: 422,
    ErrorCode.CURRENCY_MISMATCH: 422,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def allotment_error_handler(request: Request, exc: AllotmentError) -> JSONResponse:
    """Handle AllotmentError exceptions and convert to JSON response.

    Args:
        request: The incoming request
        exc: The AllotmentError exception

    Returns:
        JSONResponse with error details and appropriate status code.
    """
    status_code = get_http_status_for_error(exc.code)
    logger.warning(
        "Request failed | path=%s | error_code=%s | details=%s",
        request.url.path,
        exc.code.value,
        exc.details,
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(AllotmentError, allotment_error_handler)  # type: ignore[arg-type]
