"""MCP tools for the order backend.

Two thin passthroughs:
1. list_orders - the current order list
2. sync_order - manual sync of one order by its order code

Every tool returns a ``ToolResult`` whose text is either pretty-printed
JSON or a readable error message. Tools never raise.
"""

import json
from dataclasses import dataclass
from typing import Any

import structlog

from tiktok_orders.application.sync_service import validate_order_id
from tiktok_orders.infrastructure.order_client import APIResponse, OrderAPIClient

logger = structlog.get_logger()


@dataclass(frozen=True)
class ToolResult:
    """Text returned to the agent host, flagged when it is an error."""

    text: str
    is_error: bool = False


def format_error(response: APIResponse) -> str:
    """Format an API error response for MCP output."""
    if response.error:
        return f"Error [{response.error.error_code}]: {response.error.message}"
    return "Unknown error occurred"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


class OrderTools:
    """MCP tools over the order backend."""

    def __init__(self, api_client: OrderAPIClient) -> None:
        """Initialize order tools.

        Args:
            api_client: Order backend client.
        """
        self.api = api_client

    # =========================================================================
    # Tool 1: list_orders
    # =========================================================================

    async def list_orders(self) -> ToolResult:
        """Get the latest orders with their status.

        Returns:
            JSON array of raw order records. A body without ``order_list``
            yields an empty array.
        """
        logger.info("Listing orders")

        response = await self.api.list_orders()
        if not response.success:
            return ToolResult(
                text=f"Failed to fetch orders: {format_error(response)}",
                is_error=True,
            )

        data = response.data if isinstance(response.data, dict) else {}
        orders = data.get("order_list")
        if not isinstance(orders, list):
            orders = []

        return ToolResult(text=to_json(orders))

    # =========================================================================
    # Tool 2: sync_order
    # =========================================================================

    async def sync_order(self, order_id: str) -> ToolResult:
        """Manually sync one order with its upstream source.

        Args:
            order_id: The order code to sync.

        Returns:
            JSON of the backend's sync result.
        """
        cleaned = validate_order_id(order_id)
        if cleaned is None:
            return ToolResult(
                text="Failed to sync order: order_id must not be empty",
                is_error=True,
            )

        logger.info("Syncing order", order_id=cleaned)

        response = await self.api.sync_order(cleaned)
        if not response.success:
            return ToolResult(
                text=f"Failed to sync order {cleaned}: {format_error(response)}",
                is_error=True,
            )

        return ToolResult(text=to_json(response.data))
