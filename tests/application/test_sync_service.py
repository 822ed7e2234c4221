"""Tests for the manual sync action."""

from unittest.mock import AsyncMock

import pytest

from tiktok_orders.application.sync_service import (
    OrderSyncService,
    SyncResult,
    SyncStatus,
)
from tests.conftest import make_error_response, make_success_response


@pytest.fixture
def sync_service(mock_api_client, store) -> OrderSyncService:
    return OrderSyncService(mock_api_client, store)


class TestSync:
    """Tests for OrderSyncService.sync."""

    @pytest.mark.asyncio
    async def test_success_triggers_one_refetch(self, sync_service, store, mock_api_client) -> None:
        """A reported success refetches the collection exactly once."""
        await store.fetch()
        mock_api_client.list_orders.reset_mock()

        result = await sync_service.sync("TT-1002")

        assert result.status is SyncStatus.SYNCED
        assert result.success is True
        assert result.refetched is True
        mock_api_client.sync_order.assert_awaited_once_with("TT-1002")
        mock_api_client.list_orders.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_backend_rejection_does_not_refetch(self, sync_service, store, mock_api_client) -> None:
        """success=false leaves the store untouched."""
        await store.fetch()
        before = store.snapshot
        mock_api_client.list_orders.reset_mock()
        mock_api_client.sync_order.return_value = make_success_response(
            {"success": False, "message": "Order not found upstream"}
        )

        result = await sync_service.sync("TT-1002")

        assert result.status is SyncStatus.REJECTED
        assert result.success is False
        assert result.message == "Order not found upstream"
        assert result.refetched is False
        mock_api_client.list_orders.assert_not_awaited()
        assert store.snapshot is before

    @pytest.mark.asyncio
    async def test_transport_failure(self, sync_service, mock_api_client) -> None:
        """Client errors are reported, not raised."""
        mock_api_client.sync_order.return_value = make_error_response(
            "TIMEOUT", "Request timed out: /sync-order-id", status_code=504
        )

        result = await sync_service.sync("TT-1002")

        assert result.status is SyncStatus.FAILED
        assert "TIMEOUT" in result.message
        mock_api_client.list_orders.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_synced_is_skipped(self, sync_service, store, mock_api_client) -> None:
        """The action is disabled for orders already synced."""
        await store.fetch()

        assert sync_service.can_sync("TT-1001") is False
        result = await sync_service.sync("TT-1001")

        assert result.status is SyncStatus.SKIPPED
        mock_api_client.sync_order.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("order_id", ["", "   "])
    async def test_blank_order_id_is_invalid(self, sync_service, mock_api_client, order_id) -> None:
        """Blank ids are rejected before any request."""
        result = await sync_service.sync(order_id)

        assert result.status is SyncStatus.INVALID
        mock_api_client.sync_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_order_can_still_sync(self, sync_service, mock_api_client) -> None:
        """Orders not in the snapshot are forwarded to the backend."""
        result = await sync_service.sync("  NEW-1 ")

        assert result.order_id == "NEW-1"
        mock_api_client.sync_order.assert_awaited_once_with("NEW-1")

    @pytest.mark.asyncio
    async def test_failed_refetch_after_sync(self, sync_service, store, mock_api_client) -> None:
        """The sync still counts as done when the follow-up fetch fails."""
        store.refresh = AsyncMock(return_value=False)

        result = await sync_service.sync("TT-1002")

        assert result.status is SyncStatus.SYNCED
        assert result.refetched is False
        store.refresh.assert_awaited_once()

    def test_result_to_dict(self) -> None:
        data = SyncResult(order_id="A1", status=SyncStatus.SYNCED, message="ok", refetched=True).to_dict()
        assert data == {
            "success": True,
            "order_id": "A1",
            "status": "synced",
            "message": "ok",
            "refetched": True,
            "backend_response": {},
        }
