"""Shared fixtures for notification tests."""

from unittest.mock import MagicMock

import pytest

from infrastructure.operations import OperationResult
from modules.notifications.channels import EmailChannel, SlackChannel, TaskChannel
from modules.notifications.history import (
    InMemoryNotificationHistoryStore,
    NotificationHistory,
)
from modules.notifications.orchestrator import NotificationOrchestrator
from modules.reservations.aggregator import UserAggregator
from modules.reservations.source import InMemoryReservationSource

CHANNEL_SPECS = {"email": EmailChannel, "slack": SlackChannel, "task": TaskChannel}


@pytest.fixture
def channel_factory():
    """Factory for mock delivery channels.

    Example:
        slack = channel_factory("slack", send_side_effect=ChannelDeliveryError(...))
        email = channel_factory("email", configured=False)
    """

    def _factory(name, configured=True, send_result=None, send_side_effect=None):
        channel = MagicMock(spec=CHANNEL_SPECS[name])
        channel.channel_name = name
        channel.is_configured.return_value = configured
        channel.send.return_value = send_result or OperationResult.success()
        if send_side_effect is not None:
            channel.send.side_effect = send_side_effect
        if name == "slack":
            channel.broadcast.return_value = OperationResult.success()
        return channel

    return _factory


@pytest.fixture
def history_store():
    return InMemoryNotificationHistoryStore()


@pytest.fixture
def orchestrator_factory(channel_factory, history_store):
    """Factory for an orchestrator over in-memory reservations and history."""

    def _factory(records=None, email=None, slack=None, task=None):
        return NotificationOrchestrator(
            aggregator=UserAggregator(InMemoryReservationSource(records or [])),
            history=NotificationHistory(history_store),
            email_channel=email or channel_factory("email"),
            slack_channel=slack or channel_factory("slack"),
            task_channel=task,
        )

    return _factory


@pytest.fixture
def three_users(reservation_factory):
    """Jane and Bob with two reservations each, Ann with one."""
    return [
        reservation_factory(user_id="u-1", email="jane@example.com", serial="A1-SOC CUB1"),
        reservation_factory(user_id="u-1", email="jane@example.com", serial="A1-SOC CUB2"),
        reservation_factory(
            user_id="u-2", email="bob@example.com", display_name="Bob", serial="B1-SOC CUB1"
        ),
        reservation_factory(
            user_id="u-2", email="bob@example.com", display_name="Bob", serial="B1-SOC CUB3"
        ),
        reservation_factory(
            user_id="u-3", email="ann@example.com", display_name="Ann", serial="C1-SOC CUB5"
        ),
    ]
