"""Order store.

Owns the fetched order collection, its statistics and the loading flag.
The store is the only writer of that state; views read snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from tiktok_orders.domain.exceptions import MalformedOrderError, OrderFetchError
from tiktok_orders.domain.models import (
    Order,
    OrderStats,
    compute_stats,
    decode_order_list,
)
from tiktok_orders.infrastructure.order_client import OrderAPIClient

logger = structlog.get_logger()


@dataclass(frozen=True)
class OrderSnapshot:
    """Orders and stats from one successful fetch."""

    orders: tuple[Order, ...] = ()
    stats: OrderStats = field(default_factory=OrderStats)
    fetched_at: datetime | None = None


class OrderStore:
    """Fetches orders from the backend and keeps the latest good snapshot.

    A failed fetch leaves the previous snapshot in place and records the
    error in ``last_error``. Overlapping fetches are not deduplicated;
    whichever settles last wins.
    """

    def __init__(self, client: OrderAPIClient) -> None:
        """Initialize the store.

        Args:
            client: Backend API client.
        """
        self._client = client
        self._snapshot = OrderSnapshot()
        self._loaded = False
        self._in_flight = 0
        self.last_error: str | None = None

    @property
    def snapshot(self) -> OrderSnapshot:
        return self._snapshot

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._snapshot.orders

    @property
    def stats(self) -> OrderStats:
        return self._snapshot.stats

    @property
    def loading(self) -> bool:
        """Whether any fetch is still in flight."""
        return self._in_flight > 0

    @property
    def loaded(self) -> bool:
        """Whether at least one fetch has succeeded."""
        return self._loaded

    @property
    def last_fetched_at(self) -> datetime | None:
        return self._snapshot.fetched_at

    def get(self, order_id: str) -> Order | None:
        """Find an order in the current snapshot by its order code."""
        for order in self._snapshot.orders:
            if order.order_id == order_id:
                return order
        return None

    async def fetch(self) -> OrderSnapshot:
        """Fetch the order list and replace the snapshot.

        Returns:
            The new snapshot.

        Raises:
            OrderFetchError: On transport failure, non-2xx status or
                invalid JSON.
            MalformedOrderError: If an order record fails validation.
        """
        self._in_flight += 1
        try:
            response = await self._client.list_orders()
            if not response.success:
                error = response.error
                raise OrderFetchError(
                    error.message if error else "Unknown error occurred",
                    error_code=error.error_code if error else "UNKNOWN_ERROR",
                    status_code=error.status_code if error else None,
                )

            orders = tuple(decode_order_list(response.data))
            snapshot = OrderSnapshot(
                orders=orders,
                stats=compute_stats(orders),
                fetched_at=datetime.now(timezone.utc),
            )
        except (OrderFetchError, MalformedOrderError) as e:
            self.last_error = e.message
            logger.error("Error fetching orders", error=e.message, **e.details)
            raise
        finally:
            self._in_flight -= 1

        self._snapshot = snapshot
        self._loaded = True
        self.last_error = None

        logger.info(
            "Orders fetched",
            total=snapshot.stats.total,
            synced=snapshot.stats.synced,
        )
        return snapshot

    async def refetch(self) -> OrderSnapshot:
        """Fetch again. Same contract as ``fetch``."""
        return await self.fetch()

    async def refresh(self) -> bool:
        """Fetch without raising.

        Returns:
            True if the snapshot was replaced.
        """
        try:
            await self.fetch()
        except (OrderFetchError, MalformedOrderError):
            return False
        return True
