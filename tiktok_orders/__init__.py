"""TikTok Orders integration.

Thin clients for the order-management backend:
- an order dashboard (FastAPI) with filter, sort, pagination and manual sync
- an MCP server exposing ``list_orders`` and ``sync_order`` to AI agents
"""

__version__ = "1.0.0"
