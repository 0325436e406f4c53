"""Cubicle reservation notifications.

Delivers per-user reservation summaries by email, Slack and Monday.com
tasks, and keeps an append-only history of every attempt.

Public API:
    - NotificationOrchestrator: notify one user, all users, or broadcast
    - NotificationHistory: best-effort audit writer
    - EmailChannel, SlackChannel, TaskChannel: delivery channels
"""

from modules.notifications.channels import (
    DeliveryChannel,
    EmailChannel,
    SlackChannel,
    TaskChannel,
)
from modules.notifications.errors import (
    AuditWriteError,
    ChannelDeliveryError,
    NotificationError,
    NotificationValidationError,
    UserNotFoundError,
)
from modules.notifications.history import (
    InMemoryNotificationHistoryStore,
    NotificationHistory,
    NotificationHistoryStore,
)
from modules.notifications.orchestrator import NotificationOrchestrator

__all__ = [
    "DeliveryChannel",
    "EmailChannel",
    "SlackChannel",
    "TaskChannel",
    "AuditWriteError",
    "ChannelDeliveryError",
    "NotificationError",
    "NotificationValidationError",
    "UserNotFoundError",
    "InMemoryNotificationHistoryStore",
    "NotificationHistory",
    "NotificationHistoryStore",
    "NotificationOrchestrator",
]
