"""Pytest configuration and shared fixtures."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from tiktok_orders.application.order_store import OrderStore
from tiktok_orders.infrastructure.order_client import (
    APIError,
    APIResponse,
    OrderAPIClient,
)


def make_order(**overrides: Any) -> dict[str, Any]:
    """Raw backend order record."""
    order = {
        "id": 1,
        "order_id": "A1",
        "order_status": "COMPLETED",
        "update_time": "1700000000",
        "order_sync": True,
        "created_date": "2023-11-14",
    }
    order.update(overrides)
    return order


SAMPLE_ORDERS = [
    make_order(id=1, order_id="TT-1001", order_status="COMPLETED", update_time="1700000300", order_sync=True),
    make_order(id=2, order_id="TT-1002", order_status="AWAITING_COLLECTION", update_time="1700000100", order_sync=False),
    make_order(id=3, order_id="TT-1003", order_status="CANCELLED", update_time="1700000500", order_sync=False),
    make_order(id=4, order_id="TT-2001", order_status="IN_TRANSIT", update_time="1700000200", order_sync=True),
    make_order(id=5, order_id="TT-2002", order_status="COMPLETED", update_time="1700000400", order_sync=False),
    make_order(id=6, order_id="TT-2003", order_status="ON_HOLD", update_time="1700000000", order_sync=False),
]


def make_success_response(data: Any) -> APIResponse:
    """Create a successful API response."""
    return APIResponse(success=True, data=data)


def make_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
) -> APIResponse:
    """Create an error API response."""
    return APIResponse(
        success=False,
        error=APIError(
            error_code=error_code,
            message=message,
            status_code=status_code,
        ),
    )


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Backend listing body with six orders."""
    return {"order_list": [dict(order) for order in SAMPLE_ORDERS]}


@pytest.fixture
def mock_api_client(sample_payload) -> MagicMock:
    """Create a mock order backend client."""
    client = MagicMock(spec=OrderAPIClient)

    client.list_orders = AsyncMock(return_value=make_success_response(sample_payload))
    client.sync_order = AsyncMock(return_value=make_success_response({"success": True}))
    client.forward = AsyncMock()
    client.close = AsyncMock()

    return client


@pytest.fixture
def store(mock_api_client) -> OrderStore:
    """Order store over the mock client."""
    return OrderStore(mock_api_client)
