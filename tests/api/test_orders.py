"""Tests for the order JSON endpoints."""

from fastapi.testclient import TestClient

from tests.conftest import make_error_response, make_success_response


class TestListOrders:
    """Tests for GET /orders."""

    def test_default_page(self, client: TestClient) -> None:
        """All six orders on one page with stats."""
        response = client.get("/orders")
        assert response.status_code == 200
        data = response.json()

        assert [row["order_id"] for row in data["rows"]] == [
            "TT-1001", "TT-1002", "TT-1003", "TT-2001", "TT-2002", "TT-2003",
        ]
        assert data["stats"]["total"] == 6
        assert data["stats"]["awaitingCollection"] == 1
        assert data["pagination"] == {
            "page": 1,
            "page_size": 10,
            "page_count": 1,
            "filtered_count": 6,
            "can_previous": False,
            "can_next": False,
        }
        assert data["loaded"] is True
        assert data["loading"] is False
        assert data["error"] is None

    def test_row_display_values(self, client: TestClient) -> None:
        """Rows carry humanized status, formatted time and sync availability."""
        rows = {r["order_id"]: r for r in client.get("/orders").json()["rows"]}

        assert rows["TT-1002"]["status_label"] == "AWAITING COLLECTION"
        assert rows["TT-1002"]["updated_display"] == "14/11/2023, 22.15.00"
        assert rows["TT-1002"]["can_sync"] is True
        assert rows["TT-1001"]["can_sync"] is False

    def test_status_filter(self, client: TestClient) -> None:
        data = client.get("/orders", params={"status": "COMPLETED"}).json()
        assert {r["order_id"] for r in data["rows"]} == {"TT-1001", "TT-2002"}
        assert data["pagination"]["filtered_count"] == data["stats"]["completed"]

    def test_sort_and_paginate(self, client: TestClient) -> None:
        data = client.get(
            "/orders",
            params={"sort": "update_time:desc", "page_size": "4", "page": "2"},
        ).json()

        assert [r["order_id"] for r in data["rows"]] == ["TT-1002", "TT-2003"]
        assert data["pagination"]["page"] == 2
        assert data["pagination"]["page_count"] == 2
        assert data["pagination"]["can_previous"] is True
        assert data["pagination"]["can_next"] is False

    def test_selection_and_columns(self, client: TestClient) -> None:
        data = client.get(
            "/orders",
            params=[("selected", "TT-1001"), ("selected", "TT-9999"), ("hide", "update_time")],
        ).json()

        assert data["selected_count"] == 1
        assert "update_time" not in data["visible_columns"]
        assert [r["order_id"] for r in data["rows"] if r["selected"]] == ["TT-1001"]


class TestStatsAndGroups:
    """Tests for /orders/stats and /orders/by-date."""

    def test_stats(self, client: TestClient) -> None:
        response = client.get("/orders/stats")
        assert response.status_code == 200
        assert response.json() == {
            "total": 6,
            "awaitingCollection": 1,
            "completed": 2,
            "cancelled": 1,
            "inTransit": 1,
            "other": 1,
            "synced": 2,
        }

    def test_by_date(self, client: TestClient) -> None:
        groups = client.get("/orders/by-date").json()
        assert len(groups) == 1
        assert groups[0]["date"] == "Selasa, 14 November 2023"
        assert len(groups[0]["orders"]) == 6


class TestRefresh:
    """Tests for POST /orders/refresh."""

    def test_refresh_success(self, client: TestClient, mock_api_client) -> None:
        response = client.post("/orders/refresh")
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert mock_api_client.list_orders.await_count == 2

    def test_refresh_failure_keeps_orders(self, client: TestClient, mock_api_client) -> None:
        mock_api_client.list_orders.return_value = make_error_response(
            "REQUEST_ERROR", "Request failed: unreachable"
        )

        response = client.post("/orders/refresh")
        assert response.status_code == 502
        assert response.json()["error_code"] == "FETCH_FAILED"

        data = client.get("/orders").json()
        assert data["stats"]["total"] == 6
        assert data["error"] == "Request failed: unreachable"


class TestSync:
    """Tests for POST /orders/{order_id}/sync."""

    def test_sync_success_refetches(self, client: TestClient, mock_api_client) -> None:
        response = client.post("/orders/TT-1002/sync")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "synced"
        assert data["refetched"] is True
        mock_api_client.sync_order.assert_awaited_once_with("TT-1002")
        assert mock_api_client.list_orders.await_count == 2

    def test_sync_rejected(self, client: TestClient, mock_api_client) -> None:
        mock_api_client.sync_order.return_value = make_success_response({"success": False})

        response = client.post("/orders/TT-1002/sync")

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert mock_api_client.list_orders.await_count == 1

    def test_sync_already_synced(self, client: TestClient, mock_api_client) -> None:
        response = client.post("/orders/TT-1001/sync")

        assert response.json()["status"] == "skipped"
        mock_api_client.sync_order.assert_not_awaited()

    def test_sync_backend_failure(self, client: TestClient, mock_api_client) -> None:
        mock_api_client.sync_order.return_value = make_error_response(
            "HTTP_500", "HTTP error! status: 500"
        )

        response = client.post("/orders/TT-1002/sync")

        assert response.status_code == 502
        assert response.json()["error_code"] == "SYNC_FAILED"

    def test_sync_blank_order_id(self, client: TestClient, mock_api_client) -> None:
        response = client.post("/orders/%20/sync")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ORDER_ID"
        mock_api_client.sync_order.assert_not_awaited()

    def test_sync_from_form_redirects(self, client: TestClient) -> None:
        response = client.post(
            "/orders/TT-1002/sync",
            params={"next": "/?page=1&status=AWAITING_COLLECTION"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        location = response.headers["location"]
        assert location.startswith("/?page=1&status=AWAITING_COLLECTION&notice=")
        assert "TT-1002" in location

    def test_external_redirect_ignored(self, client: TestClient) -> None:
        response = client.post(
            "/orders/TT-1002/sync",
            params={"next": "//evil.example.com/"},
            follow_redirects=False,
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
