"""Notification models.

Audit records, delivery context and the structured results returned by the
orchestrator. Every bulk result keeps per-channel and per-recipient detail
so callers can tell "not configured" from "configured but failed".
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Kinds of notification attempts recorded in history.

    `email`/`slack` are per-recipient records written during bulk runs;
    `bulk_email`/`bulk_slack` summarize a whole channel run.
    """

    INDIVIDUAL = "individual"
    INDIVIDUAL_EMAIL = "individual_email"
    INDIVIDUAL_SLACK = "individual_slack"
    EMAIL = "email"
    SLACK = "slack"
    BULK_EMAIL = "bulk_email"
    BULK_SLACK = "bulk_slack"
    CUSTOM_EMAIL = "custom_email"
    CUSTOM_SLACK = "custom_slack"
    BROADCAST_SLACK = "broadcast_slack"
    TASK = "task"


class AttemptStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationAttempt(BaseModel):
    """One append-only audit record for one delivery attempt.

    Example:
        NotificationAttempt(
            type=NotificationType.INDIVIDUAL_EMAIL,
            status=AttemptStatus.SUCCESS,
            message="Individual email sent to jane@example.com",
            recipients=["jane@example.com"],
            sent_by="admin-1",
        )
    """

    id: str = Field(default_factory=_new_id)
    type: NotificationType
    status: AttemptStatus
    message: str
    recipients: List[str] = Field(default_factory=list)
    sent_by: Optional[str] = None
    error: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class DeliveryContext(BaseModel):
    """Per-send context handed to channels.

    Attributes:
        date: Validated day filter, shown in message headings only
        message: Custom message; when set channels render it instead of the
            reservation summary
        initiator_id: Who triggered the send
    """

    date: Optional[str] = None
    message: Optional[str] = None
    initiator_id: Optional[str] = None


class ChannelOutcome(BaseModel):
    success: bool
    error: Optional[str] = None
    skipped: bool = False
    detail: Dict[str, Any] = Field(default_factory=dict)


class NotifyUserResult(BaseModel):
    """Outcome of notifying one user on every channel.

    `success` is True when at least one channel delivered.
    """

    success: bool
    user: str
    date: Optional[str] = None
    email: ChannelOutcome
    slack: ChannelOutcome
    task: Optional[ChannelOutcome] = None


class RecipientFailure(BaseModel):
    email: str
    error: str


class ChannelBulkReport(BaseModel):
    """One channel's bulk run."""

    channel: str
    configured: bool
    total_users: int = 0
    sent_count: int = 0
    success_emails: List[str] = Field(default_factory=list)
    failures: List[RecipientFailure] = Field(default_factory=list)
    skipped_count: int = 0
    error: Optional[str] = None
    cancelled: bool = False


class BulkNotificationReport(BaseModel):
    """Outcome of notifying every user.

    `sent_count` is the best channel's count of confirmed deliveries.
    """

    sent_count: int = 0
    total_users: int = 0
    channels: Dict[str, ChannelBulkReport] = Field(default_factory=dict)
    cancelled: bool = False


class BroadcastType(str, Enum):
    SLACK = "slack"
    EMAIL = "email"
    CUBICLE_SEQUENCE = "cubicle_sequence"
    BULK = "bulk"


class BroadcastReport(BaseModel):
    type: BroadcastType
    success: bool
    message: str
    announcement: Optional[ChannelOutcome] = None
    users: Optional[BulkNotificationReport] = None


class CustomNotificationResult(BaseModel):
    success: bool
    user: str
    channel: str
    error: Optional[str] = None


class TypeCount(BaseModel):
    type: NotificationType
    count: int


class HistoryStatistics(BaseModel):
    """Aggregate view of the notification history over an optional window.

    Attributes:
        success_rate: Percentage of successful attempts, two decimals; 0 when empty
        type_breakdown: Attempt counts per type, most frequent first
        recent_activity: The newest attempts in the window
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    total: int = 0
    successful: int = 0
    failed: int = 0
    success_rate: float = 0
    type_breakdown: List[TypeCount] = Field(default_factory=list)
    recent_activity: List[NotificationAttempt] = Field(default_factory=list)


class UtilizationSnapshot(BaseModel):
    """Utilization figures used to decide whether a task is warranted."""

    avg_utilization: float
    peak_utilization: float
    total_reservations: int
    unique_users: int = 1


class ActionNeeded(BaseModel):
    required: bool
    urgency: Optional[str] = None
    reason: Optional[str] = None
