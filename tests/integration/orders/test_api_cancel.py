"""Integration tests for POST /orders/{orderId}/cancel."""

from __future__ import annotations

from datetime import datetime

import pytest

pytestmark = pytest.mark.integration


class TestCancelOrder:
    @pytest.mark.parametrize(
        "path", [(), ("processing",), ("processing", "shipped")]
    )
    def test_cancellable_statuses(self, api_client, create_order, advance, path):
        order = create_order()
        advance(order["orderId"], *path)

        response = api_client.post(
            f"/orders/{order['orderId']}/cancel", {"reason": "Changed my mind"}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Order cancelled successfully"
        assert set(body["data"]) == {
            "orderId",
            "status",
            "cancelledAt",
            "cancellationReason",
        }
        assert body["data"]["status"] == "cancelled"
        assert body["data"]["cancellationReason"] == "Changed my mind"

    def test_default_reason_without_body(self, api_client, create_order):
        order = create_order()

        data = api_client.post(f"/orders/{order['orderId']}/cancel").json()["data"]

        assert data["cancellationReason"] == "Cancelled by customer"

    def test_trailing_slash(self, api_client, create_order):
        order = create_order()
        response = api_client.post(f"/orders/{order['orderId']}/cancel/")
        assert response.status_code == 200

    def test_second_cancel_echoes_first(self, api_client, create_order):
        order = create_order()
        first = api_client.post(
            f"/orders/{order['orderId']}/cancel", {"reason": "First"}, format="json"
        ).json()["data"]

        response = api_client.post(
            f"/orders/{order['orderId']}/cancel", {"reason": "Second"}, format="json"
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Order is already cancelled"
        assert body["data"]["orderId"] == order["orderId"]
        assert body["data"]["cancellationReason"] == "First"
        assert datetime.fromisoformat(
            body["data"]["cancelledAt"]
        ) == datetime.fromisoformat(first["cancelledAt"])

    def test_delivered_cannot_be_cancelled(self, api_client, create_order, advance):
        order = create_order()
        advance(order["orderId"], "processing", "shipped", "delivered")

        response = api_client.post(f"/orders/{order['orderId']}/cancel")

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot cancel a delivered order"

    def test_unknown_order(self, api_client):
        response = api_client.post("/orders/ORD-404/cancel")
        assert response.status_code == 404

    def test_cancelled_order_visible_on_read(self, api_client, create_order):
        order = create_order()
        api_client.post(f"/orders/{order['orderId']}/cancel")

        data = api_client.get(f"/orders/{order['orderId']}").json()["data"]

        assert data["status"] == "cancelled"
        assert data["cancelledAt"] is not None
