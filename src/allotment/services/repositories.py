"""DynamoDB-backed repositories for rate documents and allocations.

Every read and write is scoped by the tenant id passed in by the caller.

Tables:
- rate-documents: rate_key (org#variant) / rate_id
- allocation-buckets: bucket_key (org#variant#supplier) / date
- allocations: org_id / allocation_id
"""

import datetime as dt
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from boto3.dynamodb.conditions import Key

from allotment.models import (
    ContractAllocation,
    DailyBucket,
    GenerationResult,
    InventoryCount,
    Limited,
    OccupancyTier,
    PricingModel,
    RateDocument,
    Season,
    Unlimited,
)

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService


def _optional_int(item: dict[str, Any], key: str) -> int | None:
    value = item.get(key)
    return int(value) if value is not None else None


def _optional_date(item: dict[str, Any], key: str) -> dt.date | None:
    value = item.get(key)
    return dt.date.fromisoformat(value) if value else None


def _optional_decimal(item: dict[str, Any], key: str) -> Decimal | None:
    value = item.get(key)
    return Decimal(str(value)) if value is not None else None


def _drop_none(item: dict[str, Any]) -> dict[str, Any]:
    """DynamoDB stores absent attributes, not nulls."""
    return {k: v for k, v in item.items() if v is not None}


class RateRepository:
    """Read/write access to rate documents."""

    TABLE = "rate-documents"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize rate repository.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    @staticmethod
    def rate_key(org_id: str, variant_id: str) -> str:
        return f"{org_id}#{variant_id}"

    def list_rate_documents(self, org_id: str, variant_id: str) -> list[RateDocument]:
        """Get all rate documents of a product variant.

        Args:
            org_id: Tenant id
            variant_id: Product variant id

        Returns:
            Supplier and master rate documents, unordered
        """
        items = self.db.query_partition(
            self.TABLE, "rate_key", self.rate_key(org_id, variant_id)
        )
        return [self._item_to_rate_document(item) for item in items]

    def put_rate_document(self, org_id: str, document: RateDocument) -> bool:
        """Create or replace a rate document.

        Args:
            org_id: Tenant id
            document: Rate document to store

        Returns:
            True if stored
        """
        item = _drop_none(
            {
                "rate_key": self.rate_key(org_id, document.product_variant_id),
                "rate_id": document.rate_id,
                "org_id": org_id,
                "product_variant_id": document.product_variant_id,
                "supplier_id": document.supplier_id,
                "valid_from": document.valid_from.isoformat(),
                "valid_to": document.valid_to.isoformat(),
                "priority": document.priority,
                "created_at": document.created_at.isoformat(),
                "room_type": document.room_type,
                "currency": document.currency,
                "block_start": document.block_start.isoformat() if document.block_start else None,
                "block_end": document.block_end.isoformat() if document.block_end else None,
                "seasons": [self._season_to_item(s) for s in document.seasons],
                "occupancies": [self._tier_to_item(t) for t in document.occupancies],
                "extra_night_occupancies": [
                    self._tier_to_item(t) for t in document.extra_night_occupancies
                ],
            }
        )
        return self.db.put_item(self.TABLE, item)

    @staticmethod
    def _season_to_item(season: Season) -> dict[str, Any]:
        return _drop_none(
            {
                "season_from": season.season_from.isoformat(),
                "season_to": season.season_to.isoformat(),
                "dow_mask": season.dow_mask,
                "min_stay": season.min_stay,
                "max_stay": season.max_stay,
                "min_pax": season.min_pax,
                "max_pax": season.max_pax,
            }
        )

    @staticmethod
    def _tier_to_item(tier: OccupancyTier) -> dict[str, Any]:
        return {
            "min_occupancy": tier.min_occupancy,
            "max_occupancy": tier.max_occupancy,
            "pricing_model": tier.pricing_model.value,
            "base_amount": tier.base_amount,
            "per_person_amount": tier.per_person_amount,
        }

    @staticmethod
    def _item_to_season(item: dict[str, Any]) -> Season:
        return Season(
            season_from=dt.date.fromisoformat(item["season_from"]),
            season_to=dt.date.fromisoformat(item["season_to"]),
            dow_mask=int(item.get("dow_mask", 127)),
            min_stay=_optional_int(item, "min_stay"),
            max_stay=_optional_int(item, "max_stay"),
            min_pax=_optional_int(item, "min_pax"),
            max_pax=_optional_int(item, "max_pax"),
        )

    @staticmethod
    def _item_to_tier(item: dict[str, Any]) -> OccupancyTier:
        return OccupancyTier(
            min_occupancy=int(item["min_occupancy"]),
            max_occupancy=int(item["max_occupancy"]),
            pricing_model=PricingModel(item.get("pricing_model", "fixed")),
            base_amount=_optional_decimal(item, "base_amount") or Decimal("0"),
            per_person_amount=_optional_decimal(item, "per_person_amount") or Decimal("0"),
        )

    def _item_to_rate_document(self, item: dict[str, Any]) -> RateDocument:
        """Convert DynamoDB item to RateDocument model."""
        return RateDocument(
            rate_id=item["rate_id"],
            product_variant_id=item["product_variant_id"],
            supplier_id=item.get("supplier_id"),
            valid_from=dt.date.fromisoformat(item["valid_from"]),
            valid_to=dt.date.fromisoformat(item["valid_to"]),
            priority=int(item.get("priority", 100)),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            room_type=item.get("room_type", "standard"),
            currency=item.get("currency", "EUR"),
            block_start=_optional_date(item, "block_start"),
            block_end=_optional_date(item, "block_end"),
            seasons=[self._item_to_season(s) for s in item.get("seasons", [])],
            occupancies=[self._item_to_tier(t) for t in item.get("occupancies", [])],
            extra_night_occupancies=[
                self._item_to_tier(t) for t in item.get("extra_night_occupancies", [])
            ],
        )


class AllocationRepository:
    """Daily buckets and allocation records."""

    BUCKETS_TABLE = "allocation-buckets"
    ALLOCATIONS_TABLE = "allocations"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize allocation repository.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    @staticmethod
    def bucket_key(org_id: str, variant_id: str, supplier_id: str) -> str:
        return f"{org_id}#{variant_id}#{supplier_id}"

    def save_buckets(
        self,
        org_id: str,
        variant_id: str,
        supplier_id: str,
        buckets: Iterable[DailyBucket],
    ) -> GenerationResult:
        """Insert buckets, skipping days that already have one.

        The (tenant, variant, supplier, date) key is unique; an existing
        bucket is left untouched so re-expanding a window is idempotent.

        Args:
            org_id: Tenant id
            variant_id: Product variant id
            supplier_id: Supplier id
            buckets: Buckets to insert

        Returns:
            Counts of inserted and skipped buckets
        """
        key = self.bucket_key(org_id, variant_id, supplier_id)
        created_at = dt.datetime.now(dt.timezone.utc).isoformat()
        items = (
            _drop_none(
                {
                    "bucket_key": key,
                    "date": bucket.date.isoformat(),
                    "org_id": org_id,
                    "product_variant_id": variant_id,
                    "supplier_id": supplier_id,
                    "quantity": (
                        None if isinstance(bucket.quantity, Unlimited) else bucket.quantity.units
                    ),
                    "booked": bucket.booked,
                    "held": bucket.held,
                    "stop_sell": bucket.stop_sell,
                    "blackout": bucket.blackout,
                    "created_at": created_at,
                }
            )
            for bucket in buckets
        )
        inserted, skipped = self.db.insert_missing(self.BUCKETS_TABLE, items, "bucket_key")
        return GenerationResult(inserted=inserted, skipped=skipped)

    def list_buckets(
        self,
        org_id: str,
        variant_id: str,
        supplier_id: str,
        start_date: dt.date,
        end_date: dt.date,
    ) -> list[DailyBucket]:
        """Get buckets for a date range, both ends inclusive, ordered by date."""
        items = self.db.query_partition(
            self.BUCKETS_TABLE,
            "bucket_key",
            self.bucket_key(org_id, variant_id, supplier_id),
            sort_key_condition=Key("date").between(
                start_date.isoformat(), end_date.isoformat()
            ),
        )
        return [self._item_to_bucket(item) for item in items]

    @staticmethod
    def _item_to_bucket(item: dict[str, Any]) -> DailyBucket:
        quantity = item.get("quantity")
        return DailyBucket(
            date=dt.date.fromisoformat(item["date"]),
            quantity=Unlimited() if quantity is None else Limited(units=int(quantity)),
            booked=int(item.get("booked", 0)),
            held=int(item.get("held", 0)),
            stop_sell=bool(item.get("stop_sell", False)),
            blackout=bool(item.get("blackout", False)),
        )

    def put_allocation(self, org_id: str, allocation: ContractAllocation) -> bool:
        """Create or replace an allocation record."""
        item = _drop_none(
            {
                "org_id": org_id,
                "allocation_id": allocation.allocation_id,
                "allocation_name": allocation.allocation_name,
                "contract_id": allocation.contract_id,
                "product_id": allocation.product_id,
                "valid_from": allocation.valid_from.isoformat(),
                "valid_to": allocation.valid_to.isoformat(),
                "release_days": allocation.release_days,
                "total_quantity": allocation.total_quantity,
                "total_cost": allocation.total_cost,
                "cost_per_unit": allocation.cost_per_unit,
                "currency": allocation.currency,
                "is_active": allocation.is_active,
                "inventory": [inv.model_dump() for inv in allocation.inventory],
            }
        )
        return self.db.put_item(self.ALLOCATIONS_TABLE, item)

    def list_allocations(
        self,
        org_id: str,
        active_only: bool = True,
    ) -> list[ContractAllocation]:
        """Get a tenant's allocations ordered by start date.

        Args:
            org_id: Tenant id
            active_only: Only return active allocations

        Returns:
            List of ContractAllocation objects
        """
        items = self.db.query_partition(self.ALLOCATIONS_TABLE, "org_id", org_id)
        allocations = [self._item_to_allocation(item) for item in items]
        if active_only:
            allocations = [a for a in allocations if a.is_active]
        return sorted(allocations, key=lambda a: a.valid_from)

    @staticmethod
    def _item_to_allocation(item: dict[str, Any]) -> ContractAllocation:
        """Convert DynamoDB item to ContractAllocation model."""
        # Handle is_active as string or boolean (DynamoDB may store as either)
        is_active_raw = item.get("is_active", True)
        if isinstance(is_active_raw, str):
            is_active = is_active_raw.lower() == "true"
        else:
            is_active = bool(is_active_raw)

        return ContractAllocation(
            allocation_id=item["allocation_id"],
            allocation_name=item["allocation_name"],
            contract_id=item.get("contract_id"),
            product_id=item.get("product_id"),
            valid_from=dt.date.fromisoformat(item["valid_from"]),
            valid_to=dt.date.fromisoformat(item["valid_to"]),
            release_days=_optional_int(item, "release_days"),
            total_quantity=int(item.get("total_quantity", 0)),
            total_cost=_optional_decimal(item, "total_cost"),
            cost_per_unit=_optional_decimal(item, "cost_per_unit"),
            currency=item.get("currency", "EUR"),
            is_active=is_active,
            inventory=[
                InventoryCount(
                    total_quantity=int(inv.get("total_quantity", 0)),
                    available_quantity=int(inv.get("available_quantity", 0)),
                    sold_quantity=int(inv.get("sold_quantity", 0)),
                )
                for inv in item.get("inventory", [])
            ],
        )
