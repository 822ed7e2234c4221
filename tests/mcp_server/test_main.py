"""Tests for MCP server main module."""

import json

import pytest
from mcp import types

from tiktok_orders.mcp_server.main import (
    SERVER_NAME,
    TOOL_DEFINITIONS,
    ListOrdersInput,
    SyncOrderInput,
    create_mcp_server,
    dispatch_tool,
)
from tiktok_orders.mcp_server.tools import OrderTools
from tests.conftest import make_error_response, make_order, make_success_response


@pytest.fixture
def order_tools(mock_api_client) -> OrderTools:
    return OrderTools(api_client=mock_api_client)


class TestMCPServer:
    """Tests for MCP server creation."""

    def test_create_server(self, mock_api_client):
        server = create_mcp_server(mock_api_client)
        assert server.name == SERVER_NAME == "tiktok-orders-integration"

    def test_tool_definitions(self):
        """Exactly the two backend operations are advertised."""
        assert [tool.name for tool in TOOL_DEFINITIONS] == ["list_orders", "sync_order"]


async def call_tool(server, name: str, arguments: dict) -> types.CallToolResult:
    """Send a tools/call request through the registered handler."""
    handler = server.request_handlers[types.CallToolRequest]
    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name=name, arguments=arguments),
        )
    )
    return result.root


class TestServerHandlers:
    """Tests for the MCP request handlers registered on the server."""

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, mock_api_client):
        server = create_mcp_server(mock_api_client)
        handler = server.request_handlers[types.ListToolsRequest]

        result = await handler(types.ListToolsRequest(method="tools/list"))

        assert [tool.name for tool in result.root.tools] == ["list_orders", "sync_order"]

    @pytest.mark.asyncio
    async def test_call_tool_success(self, mock_api_client):
        mock_api_client.list_orders.return_value = make_success_response(
            {"order_list": [make_order()]}
        )
        server = create_mcp_server(mock_api_client)

        result = await call_tool(server, "list_orders", {})

        assert result.isError is False
        assert json.loads(result.content[0].text) == [make_order()]

    @pytest.mark.asyncio
    async def test_call_tool_backend_failure_is_error_result(self, mock_api_client):
        """Failures reach the host as isError results, not protocol errors."""
        mock_api_client.list_orders.return_value = make_error_response("TIMEOUT", "slow", 504)
        server = create_mcp_server(mock_api_client)

        result = await call_tool(server, "list_orders", {})

        assert result.isError is True
        assert result.content[0].text == "Failed to fetch orders: Error [TIMEOUT]: slow"

    @pytest.mark.asyncio
    async def test_call_tool_blank_order_id_is_error_result(self, mock_api_client):
        server = create_mcp_server(mock_api_client)

        result = await call_tool(server, "sync_order", {"order_id": "  "})

        assert result.isError is True
        assert "must not be empty" in result.content[0].text
        mock_api_client.sync_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_call_tool_unknown_tool_is_error_result(self, mock_api_client):
        server = create_mcp_server(mock_api_client)

        result = await call_tool(server, "delete_orders", {})

        assert result.isError is True
        assert "delete_orders" in result.content[0].text


class TestToolSchemas:
    """Tests for tool input schemas."""

    def test_list_orders_schema_has_no_parameters(self):
        schema = ListOrdersInput.model_json_schema()
        assert schema.get("properties", {}) == {}
        assert "required" not in schema

    def test_sync_order_schema(self):
        schema = SyncOrderInput.model_json_schema()
        assert schema["properties"]["order_id"]["type"] == "string"
        assert schema["required"] == ["order_id"]


class TestDispatch:
    """Tests for dispatch_tool."""

    @pytest.mark.asyncio
    async def test_dispatch_list_orders(self, order_tools, mock_api_client):
        mock_api_client.list_orders.return_value = make_success_response(
            {"order_list": [make_order()]}
        )

        result = await dispatch_tool(order_tools, "list_orders", {})

        assert result.is_error is False
        assert json.loads(result.text)[0]["order_id"] == "A1"

    @pytest.mark.asyncio
    async def test_dispatch_sync_order(self, order_tools, mock_api_client):
        result = await dispatch_tool(order_tools, "sync_order", {"order_id": "A1"})

        assert result.is_error is False
        mock_api_client.sync_order.assert_awaited_once_with("A1")

    @pytest.mark.asyncio
    async def test_dispatch_missing_argument(self, order_tools, mock_api_client):
        result = await dispatch_tool(order_tools, "sync_order", None)

        assert result.is_error is True
        assert result.text.startswith("Invalid arguments for sync_order")
        mock_api_client.sync_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dispatch_unknown_tool(self, order_tools):
        result = await dispatch_tool(order_tools, "delete_orders", {})

        assert result.is_error is True
        assert result.text == "Unknown tool: delete_orders"

    @pytest.mark.asyncio
    async def test_dispatch_unexpected_exception(self, order_tools, mock_api_client):
        """Unexpected failures are reported, not raised."""
        mock_api_client.list_orders.side_effect = RuntimeError("boom")

        result = await dispatch_tool(order_tools, "list_orders", {})

        assert result.is_error is True
        assert result.text == "Tool execution failed: boom"
