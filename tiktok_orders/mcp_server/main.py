"""TikTok Orders MCP Server.

Exposes the order backend as MCP tools for AI agent interaction.
This is a thin adapter over the backend REST endpoints.

MCP Tools:
1. list_orders - Get the latest orders and their status
2. sync_order - Manually sync one order by order ID
"""

import asyncio
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import BaseModel, Field, ValidationError
import structlog

from tiktok_orders.infrastructure.config import settings
from tiktok_orders.infrastructure.logging_config import configure_logging
from tiktok_orders.infrastructure.order_client import OrderAPIClient
from tiktok_orders.mcp_server.tools import OrderTools, ToolResult

SERVER_NAME = "tiktok-orders-integration"

logger = structlog.get_logger()


# ============================================================================
# Tool Input Schemas
# ============================================================================


class ListOrdersInput(BaseModel):
    """Input schema for list_orders tool (no parameters)."""


class SyncOrderInput(BaseModel):
    """Input schema for sync_order tool."""

    order_id: str = Field(
        ...,
        min_length=1,
        description="ID of the TikTok order to sync.",
    )


TOOL_DEFINITIONS = [
    Tool(
        name="list_orders",
        description="Get the latest TikTok orders together with their status.",
        inputSchema=ListOrdersInput.model_json_schema(),
    ),
    Tool(
        name="sync_order",
        description="Manually sync a single TikTok order by its order ID.",
        inputSchema=SyncOrderInput.model_json_schema(),
    ),
]


class ToolExecutionError(Exception):
    """Raised inside the call_tool handler so the host sees ``isError``."""


# ============================================================================
# Dispatch
# ============================================================================


async def dispatch_tool(
    tools: OrderTools,
    name: str,
    arguments: dict[str, Any] | None,
) -> ToolResult:
    """Run one tool by name. Never raises."""
    arguments = arguments or {}
    try:
        if name == "list_orders":
            ListOrdersInput(**arguments)
            return await tools.list_orders()
        if name == "sync_order":
            input_data = SyncOrderInput(**arguments)
            return await tools.sync_order(order_id=input_data.order_id)
        return ToolResult(text=f"Unknown tool: {name}", is_error=True)
    except ValidationError as e:
        return ToolResult(
            text=f"Invalid arguments for {name}: {e.errors()[0]['msg']}",
            is_error=True,
        )
    except Exception as e:
        logger.exception("Tool execution failed", tool=name)
        return ToolResult(text=f"Tool execution failed: {str(e)}", is_error=True)


# ============================================================================
# MCP Server Implementation
# ============================================================================


def create_mcp_server(api_client: OrderAPIClient | None = None) -> Server:
    """Create and configure the MCP server with both tools."""
    server = Server(SERVER_NAME)

    client = api_client or OrderAPIClient(
        base_url=settings.order_api_url,
        order_list_path=settings.order_list_path,
        order_sync_path=settings.order_sync_path,
        timeout=settings.request_timeout,
    )
    tools = OrderTools(api_client=client)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available MCP tools."""
        return TOOL_DEFINITIONS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool invocation."""
        logger.info("Tool called", tool=name, arguments=arguments)

        result = await dispatch_tool(tools, name, arguments)

        logger.info("Tool completed", tool=name, is_error=result.is_error)
        if result.is_error:
            raise ToolExecutionError(result.text)
        return [TextContent(type="text", text=result.text)]

    return server


async def run_server() -> None:
    """Run the MCP server using stdio transport."""
    logger.info(
        "Starting TikTok Orders MCP Server",
        order_api_url=settings.order_api_url,
    )

    client = OrderAPIClient(
        base_url=settings.order_api_url,
        order_list_path=settings.order_list_path,
        order_sync_path=settings.order_sync_path,
        timeout=settings.request_timeout,
    )
    server = create_mcp_server(client)

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await client.close()


def main() -> None:
    """Run the MCP server.

    Entry point for the MCP server. Uses stdio transport for
    communication with AI agents; logs go to stderr.
    """
    configure_logging(settings.log_level)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
