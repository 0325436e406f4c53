"""Delivery channels: Email, Slack and Task (Monday.com)."""

from modules.notifications.channels.base import DeliveryChannel
from modules.notifications.channels.email import EmailChannel
from modules.notifications.channels.slack import SlackChannel
from modules.notifications.channels.task import TaskChannel

__all__ = ["DeliveryChannel", "EmailChannel", "SlackChannel", "TaskChannel"]
