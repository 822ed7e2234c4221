"""Domain layer for TikTok orders.

Exports order models, statistics and exceptions.
"""

from tiktok_orders.domain.exceptions import (
    MalformedOrderError,
    OrderFetchError,
    OrdersError,
)
from tiktok_orders.domain.models import (
    LEGACY_IN_TRANSIT,
    UNKNOWN_STATUS,
    Order,
    OrderStats,
    OrderStatus,
    compute_stats,
    decode_order_list,
)

__all__ = [
    # Models
    "Order",
    "OrderStats",
    "OrderStatus",
    "UNKNOWN_STATUS",
    "LEGACY_IN_TRANSIT",
    "compute_stats",
    "decode_order_list",
    # Exceptions
    "OrdersError",
    "OrderFetchError",
    "MalformedOrderError",
]
