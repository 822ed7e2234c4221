"""Order models and derived statistics.

The backend sends loosely typed JSON. ``decode_order_list`` is the only
place where raw payloads become ``Order`` values.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from tiktok_orders.domain.exceptions import MalformedOrderError


class OrderStatus(str, Enum):
    """Order statuses reported by the backend."""

    AWAITING_COLLECTION = "AWAITING_COLLECTION"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    IN_TRANSIT = "IN_TRANSIT"


UNKNOWN_STATUS = "UNKNOWN"

# Older backend builds report in-transit orders with a space.
LEGACY_IN_TRANSIT = "IN TRANSIT"

_MIN_YEAR = 2
_MAX_YEAR = 9998


class Order(BaseModel):
    """One e-commerce order as reported by the backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    order_id: str = Field(..., min_length=1)
    order_status: str = UNKNOWN_STATUS
    update_time: str
    order_sync: bool = False
    created_date: str = ""

    @field_validator("order_id", "update_time", mode="before")
    @classmethod
    def _coerce_number_to_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("order_status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return UNKNOWN_STATUS
        return value

    @field_validator("order_sync", mode="before")
    @classmethod
    def _default_sync(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("created_date", mode="before")
    @classmethod
    def _default_created_date(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @field_validator("update_time")
    @classmethod
    def _check_numeric(cls, value: str) -> str:
        if not value.lstrip("-").isdigit():
            raise ValueError("update_time must be a numeric Unix timestamp")
        try:
            moment = datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError("update_time is out of range") from e
        # Leave room to shift into any display timezone.
        if not _MIN_YEAR <= moment.year <= _MAX_YEAR:
            raise ValueError("update_time is out of range")
        return value

    @property
    def update_timestamp(self) -> int:
        """Update time as integer Unix seconds."""
        return int(self.update_time)

    @property
    def updated_at(self) -> datetime:
        """Update time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.update_timestamp, tz=timezone.utc)

    @property
    def is_known_status(self) -> bool:
        return self.order_status in _STATUS_BUCKETS


class OrderStats(BaseModel):
    """Aggregate counts over one order collection.

    ``awaiting_collection + completed + cancelled + in_transit + other``
    always equals ``total``.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    total: int = 0
    awaiting_collection: int = 0
    completed: int = 0
    cancelled: int = 0
    in_transit: int = 0
    other: int = 0
    synced: int = 0


_STATUS_BUCKETS = {
    OrderStatus.AWAITING_COLLECTION.value: "awaiting_collection",
    OrderStatus.COMPLETED.value: "completed",
    OrderStatus.CANCELLED.value: "cancelled",
    OrderStatus.IN_TRANSIT.value: "in_transit",
    LEGACY_IN_TRANSIT: "in_transit",
}


def compute_stats(orders: Iterable[Order]) -> OrderStats:
    """Count orders by status and sync flag in a single pass."""
    counts = {
        "total": 0,
        "awaiting_collection": 0,
        "completed": 0,
        "cancelled": 0,
        "in_transit": 0,
        "other": 0,
        "synced": 0,
    }
    for order in orders:
        counts["total"] += 1
        counts[_STATUS_BUCKETS.get(order.order_status, "other")] += 1
        if order.order_sync:
            counts["synced"] += 1
    return OrderStats(**counts)


def decode_order_list(payload: Any) -> list[Order]:
    """Turn a raw ``{"order_list": [...]}`` body into validated orders.

    A missing or non-list ``order_list`` yields an empty list. A single
    invalid record, or a repeated ``order_id``, rejects the whole payload.

    Args:
        payload: Decoded JSON body from the listing endpoint.

    Returns:
        Orders in backend order.

    Raises:
        MalformedOrderError: If any record fails validation.
    """
    if not isinstance(payload, Mapping):
        return []

    raw_orders = payload.get("order_list")
    if not isinstance(raw_orders, list):
        return []

    orders: list[Order] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_orders):
        if not isinstance(raw, Mapping):
            raise MalformedOrderError(index, "record is not an object")
        try:
            order = Order.model_validate(dict(raw))
        except ValidationError as e:
            raise MalformedOrderError(
                index,
                "validation failed",
                errors=[
                    {"loc": list(err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ],
            ) from e
        if order.order_id in seen:
            raise MalformedOrderError(
                index, f"duplicate order_id '{order.order_id}'"
            )
        seen.add(order.order_id)
        orders.append(order)
    return orders
