"""Integration tests for POST /orders."""

from __future__ import annotations

import pytest

from modules.orders.models import Order

pytestmark = pytest.mark.integration


class TestCreateOrder:
    def test_created_with_defaults(self, api_client, order_payload):
        response = api_client.post("/orders", order_payload, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Order created successfully"
        data = body["data"]
        assert data["orderId"] == "ORD-1"
        assert data["status"] == "pending"
        assert data["customerName"] == "Alice Smith"
        assert data["quantity"] == 2
        assert data["cancelledAt"] is None
        assert data["cancellationReason"] is None
        assert data["isDeleted"] is False
        assert data["version"] == 1
        assert data["createdAt"] and data["updatedAt"]

    def test_trailing_slash_accepted(self, api_client, order_payload):
        response = api_client.post("/orders/", order_payload, format="json")
        assert response.status_code == 201

    def test_identifiers_are_sequential(self, create_order):
        ids = [create_order()["orderId"] for _ in range(3)]
        assert ids == ["ORD-1", "ORD-2", "ORD-3"]

    def test_client_cannot_choose_id_or_status(self, api_client, order_payload):
        response = api_client.post(
            "/orders",
            {**order_payload, "orderId": "ORD-999", "status": "delivered"},
            format="json",
        )
        data = response.json()["data"]
        assert data["orderId"] == "ORD-1"
        assert data["status"] == "pending"

    def test_quantity_defaults_to_one(self, api_client, order_payload):
        order_payload.pop("quantity")
        response = api_client.post("/orders", order_payload, format="json")
        assert response.json()["data"]["quantity"] == 1

    def test_validation_errors_listed(self, api_client):
        response = api_client.post(
            "/orders",
            {"customerName": "A", "phone": "12345", "product": "Mug"},
            format="json",
        )

        assert response.status_code == 400
        body = response.json()
        assert body == {
            "success": False,
            "message": "Validation failed",
            "data": {
                "errors": [
                    {
                        "field": "customerName",
                        "message": "Customer name must be at least 2 characters",
                    },
                    {
                        "field": "phone",
                        "message": "Phone number must be at least 10 digits",
                    },
                ]
            },
        }
        assert Order.objects.count() == 0

    def test_numeric_customer_name_rejected(self, api_client, order_payload):
        response = api_client.post(
            "/orders", {**order_payload, "customerName": 12345}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["data"]["errors"] == [
            {"field": "customerName", "message": "Customer name must be a string"}
        ]
        assert Order.objects.count() == 0

    def test_malformed_json(self, api_client):
        response = api_client.post(
            "/orders", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "JSON parse error" in body["message"]

    def test_non_object_body(self, api_client):
        response = api_client.post("/orders", ["a"], format="json")
        assert response.status_code == 400
        assert response.json()["data"]["errors"] == [
            {"field": "body", "message": "Request body must be a JSON object"}
        ]

    def test_identifier_service_down(self, api_client, order_payload):
        from unittest.mock import patch

        from django.db import DatabaseError

        from modules.orders.models import Counter

        with patch.object(
            Counter.objects, "select_for_update", side_effect=DatabaseError("down")
        ):
            response = api_client.post("/orders", order_payload, format="json")

        assert response.status_code == 503
        assert response.json()["success"] is False
        assert Order.objects.count() == 0
