"""FastAPI dependency injection providers for shared services.

Services are lazily instantiated and cached with @lru_cache; the tenant
id is resolved per request from the X-Organization-ID header.

Usage in routes:
    from allotment_api.dependencies import get_org_id, get_rate_resolver

    @router.post("/pricing/calculate")
    async def calculate(
        org_id: str = Depends(get_org_id),
        resolver: RateResolver = Depends(get_rate_resolver),
    ):
        ...

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── RateRepository
        │       └── RateResolver
        │               └── MarginCalculator
        └── AllocationRepository
                ├── AllocationService
                └── ReleaseWarningService

Testing:
    Use reset_services() to clear cached instances between tests, or
    app.dependency_overrides to swap in doubles.
"""

from functools import lru_cache

from fastapi import Header, HTTPException
from starlette.status import HTTP_400_BAD_REQUEST

from allotment.services.allocations import AllocationService
from allotment.services.dynamodb import get_dynamodb_service
from allotment.services.margin import MarginCalculator
from allotment.services.rates import RateResolver
from allotment.services.release import ReleaseWarningService
from allotment.services.repositories import AllocationRepository, RateRepository

ORG_ID_HEADER = "X-Organization-ID"


def get_org_id(
    x_organization_id: str | None = Header(default=None, alias=ORG_ID_HEADER),
) -> str:
    """Resolve the tenant for the current request.

    Raises:
        HTTPException: 400 if the header is missing or blank
    """
    if not x_organization_id or not x_organization_id.strip():
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST,
            detail=f"{ORG_ID_HEADER} header is required",
        )
    return x_organization_id.strip()


@lru_cache
def get_rate_repository() -> RateRepository:
    return RateRepository(db=get_dynamodb_service())


@lru_cache
def get_allocation_repository() -> AllocationRepository:
    return AllocationRepository(db=get_dynamodb_service())


@lru_cache
def get_rate_resolver() -> RateResolver:
    """Get cached RateResolver instance.

    Returns:
        RateResolver reading from the DynamoDB rate repository.
    """
    return RateResolver(rates=get_rate_repository())


@lru_cache
def get_margin_calculator() -> MarginCalculator:
    """Get cached MarginCalculator instance.

    Returns:
        MarginCalculator sharing the cached RateResolver.
    """
    return MarginCalculator(resolver=get_rate_resolver())


@lru_cache
def get_allocation_service() -> AllocationService:
    return AllocationService(allocations=get_allocation_repository())


@lru_cache
def get_release_warning_service() -> ReleaseWarningService:
    return ReleaseWarningService(allocations=get_allocation_repository())


def reset_services() -> None:
    """Clear all cached service instances.

    Also resets the underlying DynamoDB singleton.
    """
    from allotment.services.dynamodb import reset_dynamodb_service

    get_rate_repository.cache_clear()
    get_allocation_repository.cache_clear()
    get_rate_resolver.cache_clear()
    get_margin_calculator.cache_clear()
    get_allocation_service.cache_clear()
    get_release_warning_service.cache_clear()

    reset_dynamodb_service()
