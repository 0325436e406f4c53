"""Unit tests for TaskChannel."""

from unittest.mock import MagicMock

import pytest

from infrastructure.configuration.integrations.monday import MondaySettings
from infrastructure.operations import OperationResult
from integrations.monday import MondayAPIError, MondayClient, MondayItem
from modules.notifications.channels.slack import SlackChannel
from modules.notifications.channels.task import TaskChannel
from modules.notifications.errors import ChannelDeliveryError
from modules.notifications.models import DeliveryContext


@pytest.fixture
def monday_settings():
    return MondaySettings(MONDAY_API_KEY="monday-key", MONDAY_BOARD_ID="123")


@pytest.fixture
def monday_client():
    client = MagicMock(spec=MondayClient)
    client.create_item.return_value = MondayItem(
        id="42", name="Cubicle Sequence Alert: Jane Doe", url="https://x.monday.com/42"
    )
    return client


@pytest.fixture
def announcer():
    mock = MagicMock(spec=SlackChannel)
    mock.is_configured.return_value = True
    mock.announce_task.return_value = OperationResult.success()
    return mock


@pytest.fixture
def busy_user(user_summary_factory):
    return user_summary_factory(avg_daily_reservations=9.5, total_reservations=19, days_active=2)


@pytest.mark.unit
class TestTaskChannel:
    def test_configuration(self, monday_settings, monday_client):
        assert TaskChannel(monday_settings, client=monday_client).is_configured() is True
        assert TaskChannel(MondaySettings(MONDAY_API_KEY="k"), client=monday_client).is_configured() is False
        assert TaskChannel(MondaySettings(MONDAY_BOARD_ID="1")).is_configured() is False

    def test_builds_client_from_settings(self, monday_settings):
        channel = TaskChannel(monday_settings, timeout=3)
        assert channel.client.api_key == "monday-key"
        assert channel.client.timeout == 3

    def test_creates_item_and_announces(self, monday_settings, monday_client, announcer, busy_user):
        channel = TaskChannel(monday_settings, client=monday_client, announcer=announcer)

        result = channel.send(busy_user, DeliveryContext())

        assert result.is_success
        assert result.data == {"item_id": "42", "url": "https://x.monday.com/42", "urgency": "urgent"}
        kwargs = monday_client.create_item.call_args.kwargs
        assert kwargs["board_id"] == "123"
        assert kwargs["item_name"] == "Cubicle Sequence Alert: Jane Doe"
        assert kwargs["column_values"]["status"] == {"label": "urgent"}
        announcer.announce_task.assert_called_once()

    def test_no_action_needed_is_skipped(self, monday_settings, monday_client, user_summary_factory):
        user = user_summary_factory(avg_daily_reservations=3, total_reservations=12)
        channel = TaskChannel(monday_settings, client=monday_client)

        result = channel.send(user, DeliveryContext())

        assert result.is_skipped
        assert result.data["required"] is False
        monday_client.create_item.assert_not_called()

    def test_api_error_raises_delivery_error(self, monday_settings, monday_client, busy_user):
        monday_client.create_item.side_effect = MondayAPIError(
            "Monday.com request timed out",
            OperationResult.transient_error("Monday.com request timed out", error_code="TIMEOUT"),
        )
        channel = TaskChannel(monday_settings, client=monday_client)

        with pytest.raises(ChannelDeliveryError) as exc_info:
            channel.send(busy_user, DeliveryContext())

        assert exc_info.value.channel == "task"
        assert exc_info.value.error_code == "TIMEOUT"

    def test_announcement_failure_does_not_fail_task(
        self, monday_settings, monday_client, announcer, busy_user
    ):
        announcer.announce_task.side_effect = ChannelDeliveryError("slack", "down", "SERVER_ERROR")
        channel = TaskChannel(monday_settings, client=monday_client, announcer=announcer)

        assert channel.send(busy_user, DeliveryContext()).is_success

    def test_unconfigured_announcer_is_not_used(
        self, monday_settings, monday_client, announcer, busy_user
    ):
        announcer.is_configured.return_value = False
        channel = TaskChannel(monday_settings, client=monday_client, announcer=announcer)

        channel.send(busy_user, DeliveryContext())

        announcer.announce_task.assert_not_called()
