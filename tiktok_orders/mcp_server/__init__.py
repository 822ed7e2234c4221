"""TikTok Orders MCP Server.

Exposes the order backend as two MCP tools for AI agents:

1. list_orders - Get the latest orders and their status
2. sync_order - Manually sync one order by order ID
"""
