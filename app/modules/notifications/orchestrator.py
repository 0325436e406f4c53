"""Notification orchestrator.

Fans reservation summaries out to the delivery channels. Every (user,
channel) attempt is isolated: a failure is recorded in history and in the
returned result, and never stops sibling attempts.

Usage Example:
    orchestrator = NotificationOrchestrator(
        aggregator=UserAggregator(source),
        history=NotificationHistory(store),
        email_channel=EmailChannel(settings.smtp, settings.notifications.FRONTEND_URL),
        slack_channel=SlackChannel(settings.slack, enabled=True),
    )

    result = orchestrator.notify_user("u-1", initiator_id="admin-1")
    report = orchestrator.notify_all_users(initiator_id="admin-1")
"""

import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from infrastructure.logging import bind_request_context
from modules.notifications.channels.base import DeliveryChannel
from modules.notifications.channels.email import EmailChannel
from modules.notifications.channels.slack import SlackChannel
from modules.notifications.channels.task import TaskChannel
from modules.notifications.errors import (
    ChannelDeliveryError,
    NotificationValidationError,
    UserNotFoundError,
)
from modules.notifications.history import NotificationHistory
from modules.notifications.models import (
    AttemptStatus,
    BroadcastReport,
    BroadcastType,
    BulkNotificationReport,
    ChannelBulkReport,
    ChannelOutcome,
    CustomNotificationResult,
    DeliveryContext,
    HistoryStatistics,
    NotificationAttempt,
    NotificationType,
    NotifyUserResult,
    RecipientFailure,
)
from modules.reservations.aggregator import UserAggregator
from modules.reservations.models import UserSummary
from modules.reservations.validation import is_valid_date_format

logger = structlog.get_logger()

INDIVIDUAL_TYPES = {
    "email": NotificationType.INDIVIDUAL_EMAIL,
    "slack": NotificationType.INDIVIDUAL_SLACK,
    "task": NotificationType.TASK,
}
BULK_RECIPIENT_TYPES = {
    "email": NotificationType.EMAIL,
    "slack": NotificationType.SLACK,
    "task": NotificationType.TASK,
}
BULK_SUMMARY_TYPES = {
    "email": NotificationType.BULK_EMAIL,
    "slack": NotificationType.BULK_SLACK,
}
CUSTOM_TYPES = {
    "email": NotificationType.CUSTOM_EMAIL,
    "slack": NotificationType.CUSTOM_SLACK,
}


def _not_configured(channel: str) -> str:
    return f"{channel} channel not configured"


def _validate_user_id(user_id: Any) -> None:
    if not user_id or not isinstance(user_id, str):
        raise NotificationValidationError("Valid user_id is required")


class NotificationOrchestrator:
    """Coordinates aggregation, delivery and history.

    Attributes:
        aggregator: Source of UserSummary objects
        history: Best-effort audit writer
        email_channel: Email delivery
        slack_channel: Slack delivery, also used for announcements
        task_channel: Optional task creation; takes part only when configured
    """

    def __init__(
        self,
        aggregator: UserAggregator,
        history: NotificationHistory,
        email_channel: EmailChannel,
        slack_channel: SlackChannel,
        task_channel: Optional[TaskChannel] = None,
    ):
        self.aggregator = aggregator
        self.history = history
        self.email_channel = email_channel
        self.slack_channel = slack_channel
        self.task_channel = task_channel

        logger.info(
            "notification_orchestrator_initialized",
            email_configured=email_channel.is_configured(),
            slack_configured=slack_channel.is_configured(),
            task_configured=self._task_enabled(),
        )

    def _task_enabled(self) -> bool:
        return self.task_channel is not None and self.task_channel.is_configured()

    def _delivery_channels(self) -> List[DeliveryChannel]:
        channels: List[DeliveryChannel] = [self.email_channel, self.slack_channel]
        if self.task_channel is not None and self.task_channel.is_configured():
            channels.append(self.task_channel)
        return channels

    def _deliver(
        self,
        channel: DeliveryChannel,
        user: UserSummary,
        context: DeliveryContext,
        record_type: NotificationType,
        success_message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> ChannelOutcome:
        """One (user, channel) attempt; never raises.

        A configured channel produces exactly one history record unless it
        skipped the user.
        """
        name = channel.channel_name
        if not channel.is_configured():
            return ChannelOutcome(success=False, error=_not_configured(name))

        try:
            result = channel.send(user, context)
        except ChannelDeliveryError as e:
            error, detail = e.message, {"error_code": e.error_code}
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("unexpected_channel_error", channel=name, recipient=user.email)
            error, detail = str(e), {"error_code": "UNEXPECTED_ERROR"}
        else:
            if result.is_skipped:
                return ChannelOutcome(success=False, skipped=True, detail=result.data or {})
            self.history.record(
                type=record_type,
                status=AttemptStatus.SUCCESS,
                message=success_message,
                recipients=[user.email],
                sent_by=context.initiator_id,
                data={**(data or {}), **(result.data or {})},
            )
            return ChannelOutcome(success=True, detail=result.data or {})

        logger.error("channel_delivery_failed", channel=name, recipient=user.email, error=error)
        self.history.record(
            type=record_type,
            status=AttemptStatus.ERROR,
            message=f"Failed to send {name} notification to {user.email}",
            recipients=[user.email],
            sent_by=context.initiator_id,
            error=error,
        )
        return ChannelOutcome(success=False, error=error, detail=detail)

    def notify_user(
        self,
        user_id: str,
        initiator_id: Optional[str] = None,
        date: Optional[str] = None,
    ) -> NotifyUserResult:
        """Send one user's reservation summary on every channel.

        Args:
            user_id: User identifier.
            initiator_id: Who triggered the send.
            date: Optional `YYYY-MM-DD` day filter.

        Raises:
            NotificationValidationError: Invalid user id or day filter.
            UserNotFoundError: No reservations for the user (on that day).
        """
        _validate_user_id(user_id)
        if date is not None and not is_valid_date_format(date):
            raise NotificationValidationError("Date must be in YYYY-MM-DD format")

        with bind_request_context(
            user_id=initiator_id, operation="notify_user", target_user_id=user_id
        ):
            user = self.aggregator.aggregate_one(user_id, date)
            if user is None:
                error = UserNotFoundError(user_id, date)
                logger.warning("notify_user_not_found", date=date)
                self.history.record(
                    type=NotificationType.INDIVIDUAL,
                    status=AttemptStatus.ERROR,
                    message=f"Failed to send individual notification to user {user_id}",
                    sent_by=initiator_id,
                    error=str(error),
                )
                raise error

            context = DeliveryContext(date=date, initiator_id=initiator_id)
            date_suffix = f" for date {date}" if date else ""
            data = {
                "cubicle_sequence": user.cubicle_sequence,
                "reservation_count": user.total_reservations,
                "date": date,
            }

            outcomes: Dict[str, ChannelOutcome] = {}
            for channel in self._delivery_channels():
                name = channel.channel_name
                outcomes[name] = self._deliver(
                    channel,
                    user,
                    context,
                    INDIVIDUAL_TYPES[name],
                    f"Individual cubicle sequence {name} sent to {user.email}{date_suffix}",
                    data,
                )

            success = any(outcome.success for outcome in outcomes.values())
            logger.info(
                "notify_user_completed",
                recipient=user.email,
                email_success=outcomes["email"].success,
                slack_success=outcomes["slack"].success,
                task_success=outcomes["task"].success if "task" in outcomes else None,
            )
            return NotifyUserResult(
                success=success,
                user=user.email,
                date=date,
                email=outcomes["email"],
                slack=outcomes["slack"],
                task=outcomes.get("task"),
            )

    def notify_user_custom(
        self,
        user_id: str,
        channel: str,
        message: str,
        initiator_id: Optional[str] = None,
    ) -> CustomNotificationResult:
        """Send a custom message to one user on one channel.

        Raises:
            NotificationValidationError: Invalid user id, channel or empty message.
            UserNotFoundError: No reservations for the user.
        """
        _validate_user_id(user_id)
        if channel not in CUSTOM_TYPES:
            raise NotificationValidationError('Channel must be "email" or "slack"')
        if not message or not isinstance(message, str) or not message.strip():
            raise NotificationValidationError("Message is required")

        with bind_request_context(
            user_id=initiator_id, operation="notify_user_custom", target_user_id=user_id
        ):
            user = self.aggregator.aggregate_one(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            target = self.email_channel if channel == "email" else self.slack_channel
            outcome = self._deliver(
                target,
                user,
                DeliveryContext(message=message, initiator_id=initiator_id),
                CUSTOM_TYPES[channel],
                f"Custom {channel} sent to {user.email}",
                {"custom_message": message},
            )
            return CustomNotificationResult(
                success=outcome.success,
                user=user.email,
                channel=channel,
                error=outcome.error,
            )

    def _bulk_channel(
        self,
        channel: DeliveryChannel,
        users: List[UserSummary],
        context: DeliveryContext,
        cancel_event: Optional[threading.Event] = None,
    ) -> ChannelBulkReport:
        name = channel.channel_name
        report = ChannelBulkReport(
            channel=name, configured=channel.is_configured(), total_users=len(users)
        )
        if not report.configured:
            report.error = _not_configured(name)
            return report

        for user in users:
            if cancel_event is not None and cancel_event.is_set():
                report.cancelled = True
                logger.warning("bulk_channel_cancelled", channel=name, processed=report.sent_count)
                break

            outcome = self._deliver(
                channel,
                user,
                context,
                BULK_RECIPIENT_TYPES[name],
                f"Cubicle sequence {name} sent to {user.email}",
                {
                    "cubicle_sequence": user.cubicle_sequence,
                    "reservation_count": user.total_reservations,
                },
            )
            if outcome.success:
                report.sent_count += 1
                report.success_emails.append(user.email)
            elif outcome.skipped:
                report.skipped_count += 1
            else:
                report.failures.append(
                    RecipientFailure(email=user.email, error=outcome.error or "unknown error")
                )

        summary_type = BULK_SUMMARY_TYPES.get(name)
        if summary_type is not None:
            all_failed = report.sent_count == 0 and bool(report.failures)
            self.history.record(
                type=summary_type,
                status=AttemptStatus.ERROR if all_failed else AttemptStatus.SUCCESS,
                message=(
                    f"Bulk {name} notifications completed - "
                    f"{report.sent_count}/{report.total_users} sent"
                ),
                recipients=report.success_emails,
                sent_by=context.initiator_id,
                error=f"All {name} deliveries failed" if all_failed else None,
                data={
                    "total_users": report.total_users,
                    "success_count": report.sent_count,
                    "failure_count": len(report.failures),
                    "cancelled": report.cancelled,
                },
            )

        logger.info(
            "bulk_channel_completed",
            channel=name,
            sent_count=report.sent_count,
            total_users=report.total_users,
            failure_count=len(report.failures),
            skipped_count=report.skipped_count,
        )
        return report

    def _bulk(
        self,
        channels: List[DeliveryChannel],
        initiator_id: Optional[str],
        cancel_event: Optional[threading.Event],
    ) -> BulkNotificationReport:
        users = self.aggregator.aggregate_all()
        if not users:
            logger.info("bulk_no_users")
            return BulkNotificationReport(
                channels={
                    c.channel_name: ChannelBulkReport(
                        channel=c.channel_name, configured=c.is_configured()
                    )
                    for c in channels
                }
            )

        context = DeliveryContext(initiator_id=initiator_id)
        reports = {
            c.channel_name: self._bulk_channel(c, users, context, cancel_event)
            for c in channels
        }
        sent_count = max(r.sent_count for r in reports.values())
        logger.info("bulk_completed", sent_count=sent_count, total_users=len(users))
        return BulkNotificationReport(
            sent_count=sent_count,
            total_users=len(users),
            channels=reports,
            cancelled=any(r.cancelled for r in reports.values()),
        )

    def notify_all_users(
        self,
        initiator_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkNotificationReport:
        """Send every user's summary on every channel.

        Channels run one after another; each continues past failed
        recipients. Setting `cancel_event` stops new sends; summaries for work
        already done are still recorded.
        """
        with bind_request_context(user_id=initiator_id, operation="notify_all_users"):
            return self._bulk(self._delivery_channels(), initiator_id, cancel_event)

    def _announce(self, message: Optional[str], initiator_id: Optional[str]) -> ChannelOutcome:
        if not self.slack_channel.is_configured():
            return ChannelOutcome(success=False, error=_not_configured("slack"))

        try:
            result = self.slack_channel.broadcast(message)
        except ChannelDeliveryError as e:
            logger.error("slack_announcement_failed", error=e.message)
            self.history.record(
                type=NotificationType.BROADCAST_SLACK,
                status=AttemptStatus.ERROR,
                message="Failed to send Slack channel announcement",
                sent_by=initiator_id,
                error=e.message,
            )
            return ChannelOutcome(
                success=False, error=e.message, detail={"error_code": e.error_code}
            )

        self.history.record(
            type=NotificationType.BROADCAST_SLACK,
            status=AttemptStatus.SUCCESS,
            message="Slack channel announcement sent",
            sent_by=initiator_id,
            data={"message": message},
        )
        return ChannelOutcome(success=True, detail=result.data or {})

    def broadcast(
        self,
        type: str,
        message: Optional[str] = None,
        initiator_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BroadcastReport:
        """Broadcast by type.

        - slack: channel announcement plus per-user Slack summaries
        - email / cubicle_sequence: same as notify_all_users
        - bulk: channel announcement plus notify_all_users

        Partial failures are reported, never raised.

        Raises:
            NotificationValidationError: Unknown broadcast type.
        """
        try:
            broadcast_type = BroadcastType(type)
        except ValueError:
            valid = ", ".join(t.value for t in BroadcastType)
            raise NotificationValidationError(
                f"Invalid notification type: {type}. Must be one of: {valid}"
            ) from None

        with bind_request_context(
            user_id=initiator_id, operation="broadcast", broadcast_type=broadcast_type.value
        ):
            logger.info("broadcast_started")

            if broadcast_type == BroadcastType.SLACK:
                announcement = self._announce(message, initiator_id)
                users = None
                if self.slack_channel.is_configured():
                    users = self._bulk([self.slack_channel], initiator_id, cancel_event)
                success = announcement.success or (users is not None and users.sent_count > 0)
                return BroadcastReport(
                    type=broadcast_type,
                    success=success,
                    message="Slack broadcast completed" if success else "Slack broadcast failed",
                    announcement=announcement,
                    users=users,
                )

            if broadcast_type in (BroadcastType.EMAIL, BroadcastType.CUBICLE_SEQUENCE):
                users = self._bulk(self._delivery_channels(), initiator_id, cancel_event)
                return BroadcastReport(
                    type=broadcast_type,
                    success=users.sent_count > 0 or users.total_users == 0,
                    message=f"{users.sent_count}/{users.total_users} users reached",
                    users=users,
                )

            announcement = self._announce(message, initiator_id)
            users = self._bulk(self._delivery_channels(), initiator_id, cancel_event)
            email_report = users.channels.get("email")
            email_sent = email_report.sent_count if email_report else 0
            return BroadcastReport(
                type=broadcast_type,
                success=announcement.success and email_sent > 0,
                message="Bulk notifications completed",
                announcement=announcement,
                users=users,
            )

    def get_users_with_sequences(self) -> List[UserSummary]:
        return self.aggregator.aggregate_all()

    def get_service_status(self) -> Dict[str, Dict[str, Any]]:
        """Configuration state of each channel and the reservation source."""
        status: Dict[str, Dict[str, Any]] = {
            "email": {"configured": self.email_channel.is_configured(), "channel": "email"},
            "slack": {"configured": self.slack_channel.is_configured(), "channel": "slack"},
            "task": {"configured": self._task_enabled(), "channel": "task"},
            "reservations": {"source": type(self.aggregator.source).__name__},
        }
        return status

    def recent_history(self, limit: int = 50) -> List[NotificationAttempt]:
        """Most recent notification attempts, newest first (limit 1..100)."""
        return self.history.recent(limit)

    def history_statistics(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> HistoryStatistics:
        """Aggregate notification history over [start, end]; see NotificationHistory.statistics."""
        return self.history.statistics(start, end)
