"""Pytest configuration and fixtures for allotment tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Sample rate documents and allocation windows
"""

import os
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Generator

import boto3
import pytest
from moto import mock_aws

from allotment.models import (
    AllocationWindow,
    OccupancyTier,
    PricingModel,
    RateDocument,
)

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-allotment")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Reset cached services and the DynamoDB singleton around each test.

    Tests using mock_aws then get a fresh service instance inside the
    mock context rather than one left over from a previous test.
    """
    from allotment_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create all required DynamoDB tables for testing."""
    tables = [
        {
            "TableName": "test-allotment-rate-documents",
            "KeySchema": [
                {"AttributeName": "rate_key", "KeyType": "HASH"},
                {"AttributeName": "rate_id", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "rate_key", "AttributeType": "S"},
                {"AttributeName": "rate_id", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": "test-allotment-allocation-buckets",
            "KeySchema": [
                {"AttributeName": "bucket_key", "KeyType": "HASH"},
                {"AttributeName": "date", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "bucket_key", "AttributeType": "S"},
                {"AttributeName": "date", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
        {
            "TableName": "test-allotment-allocations",
            "KeySchema": [
                {"AttributeName": "org_id", "KeyType": "HASH"},
                {"AttributeName": "allocation_id", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "org_id", "AttributeType": "S"},
                {"AttributeName": "allocation_id", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
        },
    ]

    for table_config in tables:
        dynamodb_client.create_table(**table_config)


# === Sample Data Fixtures ===


@pytest.fixture
def fixed_tier() -> OccupancyTier:
    """Flat 100/night for one to four guests."""
    return OccupancyTier(
        min_occupancy=1,
        max_occupancy=4,
        pricing_model=PricingModel.FIXED,
        base_amount=Decimal("100"),
    )


@pytest.fixture
def supplier_rate(fixed_tier: OccupancyTier) -> RateDocument:
    """Supplier rate for July with no block restriction."""
    return RateDocument(
        rate_id="rate-sup-1",
        product_variant_id="pv-100",
        supplier_id="sup-7",
        valid_from=date(2025, 7, 1),
        valid_to=date(2025, 7, 31),
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        occupancies=[fixed_tier],
    )


@pytest.fixture
def master_rate() -> RateDocument:
    """Master (selling) rate for July at 200/night."""
    return RateDocument(
        rate_id="rate-master-1",
        product_variant_id="pv-100",
        valid_from=date(2025, 7, 1),
        valid_to=date(2025, 7, 31),
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        occupancies=[
            OccupancyTier(
                min_occupancy=1,
                max_occupancy=4,
                base_amount=Decimal("200"),
            )
        ],
    )


@pytest.fixture
def june_window() -> AllocationWindow:
    """Committed allocation for June 2025, 10 units, 0.5 on weekends."""
    return AllocationWindow(
        valid_from=date(2025, 6, 1),
        valid_to=date(2025, 6, 30),
        default_quantity=10,
        weekend_multiplier=Decimal("0.5"),
    )
