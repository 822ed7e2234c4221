"""Manual order sync.

Triggers the backend sync endpoint for one order and refetches the
whole collection when the backend reports success. The local copy of
``order_sync`` is never patched in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from tiktok_orders.application.order_store import OrderStore
from tiktok_orders.infrastructure.order_client import OrderAPIClient

logger = structlog.get_logger()


class SyncStatus(str, Enum):
    """Outcome of a manual sync request."""

    SYNCED = "synced"
    SKIPPED = "skipped"
    REJECTED = "rejected"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass
class SyncResult:
    """Result of ``OrderSyncService.sync``."""

    order_id: str
    status: SyncStatus
    message: str
    refetched: bool = False
    backend_response: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status is SyncStatus.SYNCED

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "order_id": self.order_id,
            "status": self.status.value,
            "message": self.message,
            "refetched": self.refetched,
            "backend_response": self.backend_response,
        }


def validate_order_id(order_id: str | None) -> str | None:
    """Return the stripped order id, or None if it is blank."""
    if order_id is None:
        return None
    order_id = order_id.strip()
    return order_id or None


class OrderSyncService:
    """Per-row sync action for the order table."""

    def __init__(self, client: OrderAPIClient, store: OrderStore) -> None:
        """Initialize the sync service.

        Args:
            client: Backend API client.
            store: Store to refetch after a successful sync.
        """
        self._client = client
        self._store = store

    def can_sync(self, order_id: str) -> bool:
        """Whether the sync action is enabled for an order.

        Orders already marked synced in the current snapshot are disabled.
        """
        order = self._store.get(order_id)
        return order is None or not order.order_sync

    async def sync(self, order_id: str) -> SyncResult:
        """Sync one order.

        Args:
            order_id: User-facing order code.

        Returns:
            SyncResult describing what happened.
        """
        cleaned = validate_order_id(order_id)
        if cleaned is None:
            return SyncResult(
                order_id=order_id or "",
                status=SyncStatus.INVALID,
                message="order_id must not be empty",
            )

        if not self.can_sync(cleaned):
            logger.info("Order already synced", order_id=cleaned)
            return SyncResult(
                order_id=cleaned,
                status=SyncStatus.SKIPPED,
                message=f"Order {cleaned} is already synced",
            )

        logger.info("Syncing order", order_id=cleaned)
        response = await self._client.sync_order(cleaned)

        if not response.success:
            message = (
                f"Error [{response.error.error_code}]: {response.error.message}"
                if response.error
                else "Unknown error occurred"
            )
            logger.warning("Order sync failed", order_id=cleaned, error=message)
            return SyncResult(
                order_id=cleaned,
                status=SyncStatus.FAILED,
                message=message,
            )

        body = response.data if isinstance(response.data, dict) else {}
        if body.get("success") is not True:
            logger.info("Order sync rejected by backend", order_id=cleaned)
            return SyncResult(
                order_id=cleaned,
                status=SyncStatus.REJECTED,
                message=str(body.get("message") or f"Backend did not sync order {cleaned}"),
                backend_response=body,
            )

        refetched = await self._store.refresh()
        logger.info("Order synced", order_id=cleaned, refetched=refetched)
        return SyncResult(
            order_id=cleaned,
            status=SyncStatus.SYNCED,
            message=f"Order {cleaned} synced",
            refetched=refetched,
            backend_response=body,
        )
