"""Tests for the notification endpoints."""

from datetime import datetime, timezone

import pytest

from modules.notifications.errors import (
    NotificationError,
    NotificationValidationError,
    UserNotFoundError,
)
from modules.notifications.models import (
    AttemptStatus,
    BroadcastReport,
    BroadcastType,
    BulkNotificationReport,
    ChannelBulkReport,
    ChannelOutcome,
    CustomNotificationResult,
    HistoryStatistics,
    NotificationAttempt,
    NotificationType,
    NotifyUserResult,
)
from modules.reservations.source import ReservationSourceError

BASE = "/api/v1/notifications"


@pytest.mark.unit
class TestStatusAndQueries:
    def test_status(self, client, mock_orchestrator):
        mock_orchestrator.get_service_status.return_value = {
            "email": {"configured": True, "channel": "email"},
            "slack": {"configured": False, "channel": "slack"},
        }

        response = client.get(f"{BASE}/status")

        assert response.status_code == 200
        assert response.json()["slack"]["configured"] is False

    def test_users(self, client, mock_orchestrator, user_summary_factory):
        mock_orchestrator.get_users_with_sequences.return_value = [user_summary_factory()]

        response = client.get(f"{BASE}/users")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["email"] == "jane@example.com"
        assert body[0]["cubicle_sequence"] == "A1-SOC CUB1-A1-SOC CUB2, B1-SOC CUB4"

    def test_users_source_unavailable(self, client, mock_orchestrator):
        mock_orchestrator.get_users_with_sequences.side_effect = ReservationSourceError("down")

        response = client.get(f"{BASE}/users")

        assert response.status_code == 503

    def test_history(self, client, mock_orchestrator):
        mock_orchestrator.recent_history.return_value = [
            NotificationAttempt(
                type=NotificationType.BULK_EMAIL,
                status=AttemptStatus.SUCCESS,
                message="Bulk email notifications completed - 3/3 sent",
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        ]

        response = client.get(f"{BASE}/history", params={"limit": 5})

        assert response.status_code == 200
        assert response.json()[0]["type"] == "bulk_email"
        mock_orchestrator.recent_history.assert_called_once_with(5)

    def test_statistics(self, client, mock_orchestrator):
        mock_orchestrator.history_statistics.return_value = HistoryStatistics(
            total=4, successful=3, failed=1, success_rate=75.0
        )

        response = client.get(
            f"{BASE}/statistics",
            params={"start_date": "2024-03-01T00:00:00Z", "end_date": "2024-03-31T00:00:00Z"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 4
        assert body["success_rate"] == 75.0
        start, end = mock_orchestrator.history_statistics.call_args.args
        assert start == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 3, 31, tzinfo=timezone.utc)

    def test_statistics_without_window(self, client, mock_orchestrator):
        mock_orchestrator.history_statistics.return_value = HistoryStatistics()

        response = client.get(f"{BASE}/statistics")

        assert response.status_code == 200
        mock_orchestrator.history_statistics.assert_called_once_with(None, None)

    def test_statistics_inverted_window(self, client, mock_orchestrator):
        mock_orchestrator.history_statistics.side_effect = NotificationValidationError(
            "start must not be after end"
        )

        response = client.get(
            f"{BASE}/statistics",
            params={"start_date": "2024-04-01T00:00:00Z", "end_date": "2024-03-01T00:00:00Z"},
        )

        assert response.status_code == 400

    def test_statistics_history_unavailable(self, client, mock_orchestrator):
        mock_orchestrator.history_statistics.side_effect = NotificationError("read failed")

        response = client.get(f"{BASE}/statistics")

        assert response.status_code == 503
        assert response.json()["detail"] == "Notification history unavailable"


@pytest.mark.unit
class TestNotifyUser:
    def test_success(self, client, mock_orchestrator):
        mock_orchestrator.notify_user.return_value = NotifyUserResult(
            success=True,
            user="jane@example.com",
            date="2024-01-01",
            email=ChannelOutcome(success=True),
            slack=ChannelOutcome(success=False, error="slack channel not configured"),
        )

        response = client.post(
            f"{BASE}/users/u-1",
            params={"date": "2024-01-01"},
            headers={"X-Initiator-Id": "admin-1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["slack"]["error"] == "slack channel not configured"
        mock_orchestrator.notify_user.assert_called_once_with(
            "u-1", initiator_id="admin-1", date="2024-01-01"
        )

    def test_validation_error(self, client, mock_orchestrator):
        mock_orchestrator.notify_user.side_effect = NotificationValidationError(
            "Date must be in YYYY-MM-DD format"
        )

        response = client.post(f"{BASE}/users/u-1", params={"date": "01-01-2024"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Date must be in YYYY-MM-DD format"

    def test_user_not_found(self, client, mock_orchestrator):
        mock_orchestrator.notify_user.side_effect = UserNotFoundError("u-404")

        response = client.post(f"{BASE}/users/u-404")

        assert response.status_code == 404
        assert "u-404" in response.json()["detail"]

    def test_rate_limited(self, client, mock_orchestrator):
        mock_orchestrator.notify_user.side_effect = UserNotFoundError("u-404")
        for _ in range(30):
            client.post(f"{BASE}/users/u-404")

        assert client.post(f"{BASE}/users/u-404").status_code == 429


@pytest.mark.unit
class TestNotifyUserCustom:
    def test_success(self, client, mock_orchestrator):
        mock_orchestrator.notify_user_custom.return_value = CustomNotificationResult(
            success=True, user="jane@example.com", channel="email"
        )

        response = client.post(
            f"{BASE}/users/u-1/custom", json={"channel": "email", "message": "Hello"}
        )

        assert response.status_code == 200
        mock_orchestrator.notify_user_custom.assert_called_once_with(
            "u-1", "email", "Hello", initiator_id=None
        )

    def test_invalid_channel(self, client, mock_orchestrator):
        mock_orchestrator.notify_user_custom.side_effect = NotificationValidationError(
            'Channel must be "email" or "slack"'
        )

        response = client.post(
            f"{BASE}/users/u-1/custom", json={"channel": "sms", "message": "Hello"}
        )

        assert response.status_code == 400

    def test_missing_body_fields(self, client):
        response = client.post(f"{BASE}/users/u-1/custom", json={"channel": "email"})
        assert response.status_code == 422


@pytest.mark.unit
class TestBulkAndBroadcast:
    def test_bulk(self, client, mock_orchestrator):
        mock_orchestrator.notify_all_users.return_value = BulkNotificationReport(
            sent_count=3,
            total_users=3,
            channels={
                "email": ChannelBulkReport(channel="email", configured=True, total_users=3, sent_count=3)
            },
        )

        response = client.post(f"{BASE}/bulk", headers={"X-Initiator-Id": "admin-1"})

        assert response.status_code == 200
        assert response.json()["channels"]["email"]["sent_count"] == 3
        kwargs = mock_orchestrator.notify_all_users.call_args.kwargs
        assert kwargs["initiator_id"] == "admin-1"

    def test_bulk_source_unavailable(self, client, mock_orchestrator):
        mock_orchestrator.notify_all_users.side_effect = ReservationSourceError("down")
        assert client.post(f"{BASE}/bulk").status_code == 503

    def test_broadcast(self, client, mock_orchestrator):
        mock_orchestrator.broadcast.return_value = BroadcastReport(
            type=BroadcastType.SLACK,
            success=True,
            message="Slack broadcast completed",
            announcement=ChannelOutcome(success=True),
        )

        response = client.post(f"{BASE}/broadcast", json={"type": "slack", "message": "Hi all"})

        assert response.status_code == 200
        assert response.json()["type"] == "slack"
        args = mock_orchestrator.broadcast.call_args
        assert args.args == ("slack", "Hi all")

    def test_broadcast_invalid_type(self, client, mock_orchestrator):
        mock_orchestrator.broadcast.side_effect = NotificationValidationError(
            "Invalid notification type: fax. Must be one of: slack, email, cubicle_sequence, bulk"
        )

        response = client.post(f"{BASE}/broadcast", json={"type": "fax"})

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid notification type: fax")

    def test_bulk_rate_limited(self, client, mock_orchestrator):
        mock_orchestrator.notify_all_users.return_value = BulkNotificationReport()
        for _ in range(10):
            assert client.post(f"{BASE}/bulk").status_code == 200

        assert client.post(f"{BASE}/bulk").status_code == 429
