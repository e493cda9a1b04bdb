"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helper functions for pricing and allocation operation logging

Usage:
    from allotment.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In service code:
    logger = get_logger(__name__)
    logger.info("Resolving stay cost", extra={"variant_id": "PV-1"})
"""

import logging
import os
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def generate_correlation_id() -> str:
    """Generate a new correlation ID.

    Returns:
        UUID-based correlation ID string
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current request context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation-id"
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log output with correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a correlation ID prefix.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "no-correlation-id"

        base = super().format(record)

        # Prefix for easy grep/filtering
        return f"[{record.correlation_id}] {base}"


def configure_logging(level: str | None = None) -> None:
    """Install the structured formatter on the root logger.

    Args:
        level: Log level name. Defaults to LOG_LEVEL env var, then INFO.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    root.setLevel(level_name)

    if not any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def _format_context(headline: str, context: dict[str, Any]) -> str:
    parts = [headline]
    for key, value in context.items():
        if key != "operation":
            parts.append(f"{key}={value}")
    return " | ".join(parts)


def log_pricing_operation(
    logger: logging.Logger,
    operation: str,
    *,
    org_id: str | None = None,
    variant_id: str | None = None,
    supplier_id: str | None = None,
    rate_id: str | None = None,
    total_cost: Any = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a pricing operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "resolve_stay_cost", "calculate_margin")
        org_id: Tenant the operation ran for
        variant_id: Product variant priced
        supplier_id: Supplier side of the rate, None for master rates
        rate_id: Rate document that won resolution
        total_cost: Resulting total, unrounded
        error: Error message if the operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if org_id:
        context["org_id"] = org_id
    if variant_id:
        context["variant_id"] = variant_id
    if supplier_id:
        context["supplier_id"] = supplier_id
    if rate_id:
        context["rate_id"] = rate_id
    if total_cost is not None:
        context["total_cost"] = total_cost
    if error:
        context["error"] = error

    context.update(extra)
    message = _format_context(f"Pricing operation: {operation}", context)

    if error:
        logger.error(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_allocation_operation(
    logger: logging.Logger,
    operation: str,
    *,
    org_id: str | None = None,
    variant_id: str | None = None,
    supplier_id: str | None = None,
    inserted: int | None = None,
    skipped: int | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log an allocation operation with structured context.

    Skipped rows are expected on re-expansion, so a run that inserted
    nothing is logged as a warning rather than an error.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "generate_buckets")
        org_id: Tenant the operation ran for
        variant_id: Product variant of the allocation
        supplier_id: Supplier holding the allocation
        inserted: Buckets written
        skipped: Buckets that already existed
        error: Error message if the operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if org_id:
        context["org_id"] = org_id
    if variant_id:
        context["variant_id"] = variant_id
    if supplier_id:
        context["supplier_id"] = supplier_id
    if inserted is not None:
        context["inserted"] = inserted
    if skipped is not None:
        context["skipped"] = skipped
    if error:
        context["error"] = error

    context.update(extra)
    message = _format_context(f"Allocation operation: {operation}", context)

    if error:
        logger.error(message, extra=context)
    elif inserted == 0 and skipped:
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
