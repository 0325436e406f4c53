"""Unit tests for log processors."""

import pytest

from infrastructure.logging.formatters import mask_sensitive_data, truncate_large_values


@pytest.mark.unit
class TestMaskSensitiveData:
    def test_masks_known_keys(self):
        processor = mask_sensitive_data()
        event = {
            "event": "smtp_login",
            "smtp_password": "hunter2",
            "MONDAY_API_KEY": "abc",
            "slack_webhook_url": "https://hooks.slack.com/services/T/B/X",
            "Authorization": "Bearer x",
            "recipient": "jane@example.com",
        }

        result = processor(None, "info", event)

        assert result["smtp_password"] == "***REDACTED***"
        assert result["MONDAY_API_KEY"] == "***REDACTED***"
        assert result["slack_webhook_url"] == "***REDACTED***"
        assert result["Authorization"] == "***REDACTED***"
        assert result["recipient"] == "jane@example.com"
        assert result["event"] == "smtp_login"

    def test_none_values_untouched(self):
        result = mask_sensitive_data()(None, "info", {"token": None})
        assert result["token"] is None

    def test_additional_patterns(self):
        processor = mask_sensitive_data(mask_value="[x]", additional_patterns=frozenset({"board"}))
        assert processor(None, "info", {"board_id": "123"})["board_id"] == "[x]"


@pytest.mark.unit
class TestTruncateLargeValues:
    def test_truncates_long_strings(self):
        processor = truncate_large_values(max_length=10)
        result = processor(None, "info", {"html": "x" * 25, "short": "ok", "count": 12345678901})

        assert result["html"] == "x" * 10 + "...[truncated, 25 chars total]"
        assert result["short"] == "ok"
        assert result["count"] == 12345678901
