import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_phone_key_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "phone": "+1 (555) 123-4567"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["phone"] == "***MASKED***"

    @pytest.mark.parametrize(
        "text", ["call (11) 98765-4321 now", "number 5511987654321", "+55 11 98765-4321"]
    )
    def test_phone_in_text_masked(self, text):
        from config.settings import mask_sensitive_data

        result = mask_sensitive_data(None, None, {"event": "test", "detail": text})
        assert "***MASKED***" in result["detail"]
        assert "4321" not in result["detail"]

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {
            "event": "order.created",
            "order_id": "ORD-1001",
            "correlation_id": "0b8a4a52-2f6e-4c4e-9c8e-123456789012",
            "timestamp": "2026-10-17T09:15:42.123456Z",
            "quantity": 3,
        }
        result = mask_sensitive_data(None, None, dict(event_dict))
        assert result == event_dict
