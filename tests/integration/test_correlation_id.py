import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        parsed = uuid.UUID(request_id, version=4)
        assert str(parsed) == request_id

    def test_error_responses_carry_request_id(self, api_client):
        response = api_client.get("/orders/ORD-404", HTTP_X_REQUEST_ID="req-404")
        assert response.status_code == 404
        assert response["X-Request-ID"] == "req-404"

    def test_correlation_id_in_logs(self, client, caplog):
        custom_id = "log-test-correlation-456"
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        found = any(custom_id in record.getMessage() for record in caplog.records)
        assert found, (
            f"correlation_id '{custom_id}' not found in log records: "
            f"{[r.getMessage() for r in caplog.records]}"
        )

    def test_order_logs_do_not_leak_phone(self, api_client, order_payload, caplog):
        with caplog.at_level(logging.INFO):
            api_client.post("/orders", order_payload, format="json")
        messages = " ".join(record.getMessage() for record in caplog.records)
        assert "order.created" in messages
        assert "123-4567" not in messages
