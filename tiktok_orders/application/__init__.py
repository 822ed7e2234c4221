"""Application layer.

- OrderStore: fetches and owns the order snapshot
- TableState / build_table_view: filter, sort, paginate, select
- OrderSyncService: manual per-order sync with refetch
"""

from tiktok_orders.application.order_store import OrderSnapshot, OrderStore
from tiktok_orders.application.sync_service import (
    OrderSyncService,
    SyncResult,
    SyncStatus,
)
from tiktok_orders.application.table_view import (
    Column,
    SortSpec,
    TableState,
    TableView,
    build_table_view,
)

__all__ = [
    "OrderSnapshot",
    "OrderStore",
    "OrderSyncService",
    "SyncResult",
    "SyncStatus",
    "Column",
    "SortSpec",
    "TableState",
    "TableView",
    "build_table_view",
]
