import pytest

from rest_framework.test import APIClient

from modules.orders.identifiers import reset_identifier_generator


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _fresh_identifier_generator():
    """Each test builds its generator from the current settings."""
    reset_identifier_generator()
    yield
    reset_identifier_generator()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def order_payload():
    return {
        "customerName": "Alice Smith",
        "phone": "+1 (555) 123-4567",
        "product": "Mechanical Keyboard",
        "quantity": 2,
        "notes": "Leave at the front door",
    }


@pytest.fixture()
def create_order(api_client, order_payload):
    """Create an order through the API and return its ``data`` body."""

    def _create(**overrides):
        response = api_client.post(
            "/orders", {**order_payload, **overrides}, format="json"
        )
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _create


@pytest.fixture()
def advance(api_client):
    """Walk an order forward through the given statuses via PATCH."""

    def _advance(order_id, *statuses):
        body = None
        for status in statuses:
            response = api_client.patch(
                f"/orders/{order_id}", {"status": status}, format="json"
            )
            assert response.status_code == 200, response.json()
            body = response.json()["data"]
        return body

    return _advance
