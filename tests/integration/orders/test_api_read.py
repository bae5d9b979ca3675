"""Integration tests for GET /orders and GET /orders/{orderId}."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from modules.orders.models import Order

pytestmark = pytest.mark.integration


class TestRetrieveOrder:
    def test_found(self, api_client, create_order):
        order = create_order()

        response = api_client.get(f"/orders/{order['orderId']}")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Order retrieved successfully"
        assert body["data"] == order

    def test_not_found(self, api_client):
        response = api_client.get("/orders/ORD-404")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Order not found",
            "data": {"orderId": "ORD-404"},
        }

    def test_short_id_is_rejected_before_lookup(self, api_client):
        response = api_client.get("/orders/AB")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Invalid order ID format",
            "data": {"orderId": "AB"},
        }

    def test_three_character_id_is_looked_up(self, api_client):
        response = api_client.get("/orders/ORD")
        assert response.status_code == 404


class TestListOrders:
    def test_default_page(self, api_client, create_order):
        for _ in range(12):
            create_order()

        response = api_client.get("/orders")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Orders retrieved successfully"
        data = body["data"]
        assert data["total"] == 12
        assert data["page"] == 1
        assert data["limit"] == 10
        assert data["totalPages"] == 2
        assert len(data["orders"]) == 10

    def test_second_page(self, api_client, create_order):
        for _ in range(12):
            create_order()

        data = api_client.get("/orders?page=2&limit=5").json()["data"]

        assert data["page"] == 2
        assert data["totalPages"] == 3
        assert len(data["orders"]) == 5

    def test_page_beyond_last_is_empty(self, api_client, create_order):
        create_order()
        data = api_client.get("/orders?page=9").json()["data"]
        assert data["orders"] == []
        assert data["total"] == 1

    @pytest.mark.parametrize(
        "query,page,limit",
        [
            ("limit=500", 1, 100),
            ("page=0", 1, 10),
            ("page=abc&limit=xyz", 1, 10),
            ("limit=0", 1, 10),
        ],
    )
    def test_pagination_is_clamped(self, api_client, query, page, limit):
        response = api_client.get(f"/orders?{query}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert (data["page"], data["limit"]) == (page, limit)

    def test_newest_first_by_default(self, api_client, create_order):
        first = create_order()
        second = create_order()
        Order.objects.filter(order_id=first["orderId"]).update(
            created_at=timezone.now() - timedelta(days=1)
        )

        orders = api_client.get("/orders").json()["data"]["orders"]

        assert [o["orderId"] for o in orders] == [second["orderId"], first["orderId"]]

    def test_sort_by_quantity_ascending(self, api_client, create_order):
        for quantity in (5, 1, 3):
            create_order(quantity=quantity)

        orders = api_client.get("/orders?sortBy=quantity&sortOrder=asc").json()[
            "data"
        ]["orders"]

        assert [o["quantity"] for o in orders] == [1, 3, 5]

    def test_unknown_sort_key_falls_back(self, api_client, create_order):
        create_order()
        response = api_client.get("/orders?sortBy=phone;drop")
        assert response.status_code == 200
        assert response.json()["data"]["total"] == 1

    def test_filter_by_status(self, api_client, create_order, advance):
        create_order()
        moving = create_order()
        advance(moving["orderId"], "processing")

        data = api_client.get("/orders?status=processing").json()["data"]

        assert data["total"] == 1
        assert data["orders"][0]["orderId"] == moving["orderId"]

    def test_unknown_status_filter_ignored(self, api_client, create_order):
        create_order()
        create_order()
        assert api_client.get("/orders?status=lost").json()["data"]["total"] == 2

    def test_filter_by_customer_and_product(self, api_client, create_order):
        create_order(customerName="Maria Silva", product="Coffee beans")
        create_order(customerName="John Doe", product="Coffee mug")
        create_order(customerName="Maria Souza", product="Tea kettle")

        by_name = api_client.get("/orders?customerName=maria").json()["data"]
        by_product = api_client.get("/orders?product=COFFEE").json()["data"]

        assert by_name["total"] == 2
        assert by_product["total"] == 2

    def test_filter_by_created_range(self, api_client, create_order):
        old = create_order()
        create_order()
        Order.objects.filter(order_id=old["orderId"]).update(
            created_at=timezone.now() - timedelta(days=30)
        )
        today = timezone.now().date().isoformat()

        data = api_client.get(f"/orders?createdFrom={today}").json()["data"]

        assert data["total"] == 1
        assert data["orders"][0]["orderId"] != old["orderId"]

    def test_soft_deleted_orders_are_hidden(self, api_client, create_order):
        kept = create_order()
        gone = create_order()
        api_client.delete(f"/orders/{gone['orderId']}")

        data = api_client.get("/orders").json()["data"]

        assert data["total"] == 1
        assert [o["orderId"] for o in data["orders"]] == [kept["orderId"]]
