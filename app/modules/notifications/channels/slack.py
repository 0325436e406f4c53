"""Slack delivery channel.

Posts Block Kit messages to one incoming webhook: per-user reservation
summaries, custom messages, channel-wide announcements and task alerts.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog

from infrastructure.configuration.integrations.slack import SlackSettings
from infrastructure.operations import OperationResult
from integrations.monday import MondayItem
from integrations.slack import blocks
from integrations.slack.webhook import SlackWebhook, is_valid_webhook_url
from modules.notifications.channels.base import DeliveryChannel
from modules.notifications.channels.email import format_long_date
from modules.notifications.models import ActionNeeded, DeliveryContext
from modules.reservations.models import UserSummary

logger = structlog.get_logger()

DEFAULT_BROADCAST_MESSAGE = "Cubicle utilization update is now available."


def summary_message(user: UserSummary, date: Optional[str] = None) -> Dict:
    date_context = f" for {format_long_date(date)}" if date else ""
    message_blocks: List[Dict] = [
        blocks.create_header_block(f"Cubicle Reservation Update{date_context}")
    ]
    if date:
        message_blocks.append(
            blocks.create_section_block(
                f"*Date-Specific Report:* This summary shows reservations for {format_long_date(date)}"
            )
        )
    last_activity = user.last_activity.isoformat() if user.last_activity else "N/A"
    message_blocks.extend(
        [
            blocks.create_fields_block(
                {
                    "User": user.name,
                    "Total Reservations": user.total_reservations,
                    "Days Active": user.days_active,
                    "Favorite Section": user.favorite_section or "N/A",
                    "Avg Daily Reservations": user.avg_daily_reservations,
                }
            ),
            blocks.create_section_block(
                f"*Cubicle Sequence:*\n{user.cubicle_sequence or 'No reservations found'}"
            ),
            blocks.create_divider_block(),
            blocks.create_context_block([blocks.mrkdwn(f"Last activity: {last_activity}")]),
        ]
    )
    return {
        "text": f"Cubicle Reservation Update for {user.name}{date_context}",
        "blocks": message_blocks,
    }


def custom_message(user: UserSummary, message: str) -> Dict:
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return {
        "text": f"Custom Notification for {user.name}",
        "blocks": [
            blocks.create_header_block("Custom Notification"),
            blocks.create_fields_block({"User": user.name, "Time": now}),
            blocks.create_section_block(f"*Message:*\n{message}"),
            blocks.create_context_block(
                [blocks.mrkdwn("Space Optimization System - Custom Notification")]
            ),
        ],
    }


def broadcast_message(message: Optional[str]) -> Dict:
    text = message or DEFAULT_BROADCAST_MESSAGE
    return {
        "text": text,
        "blocks": [
            blocks.create_section_block(text),
            blocks.create_fields_block(
                {
                    "System Update": "New cubicle utilization data has been processed "
                    "and is available for review.",
                    "Timestamp": datetime.now(timezone.utc).isoformat(),
                }
            ),
        ],
    }


def task_message(item: MondayItem, action: ActionNeeded) -> Dict:
    section = blocks.create_section_block(
        "*New task created in Monday.com*\n\n"
        f"*Task:* {item.name}\n*Urgency:* {action.urgency}\n*Reason:* {action.reason}"
    )
    message_blocks = [section]
    if item.url:
        message_blocks.append(
            blocks.create_button_actions_block("Open Task", item.url, "open_monday_task")
        )
    return {"text": "Monday.com Task Created", "blocks": message_blocks}


class SlackChannel(DeliveryChannel):
    """Slack incoming webhook delivery.

    Configured only when notifications are enabled and the webhook URL is
    a valid https Slack URL. An invalid URL disables the channel.
    """

    def __init__(
        self,
        settings: SlackSettings,
        enabled: bool,
        timeout: int = 10,
        webhook: Optional[SlackWebhook] = None,
    ):
        self.enabled = enabled
        self.webhook_url: Optional[str] = settings.SLACK_WEBHOOK_URL
        if self.enabled and self.webhook_url and not is_valid_webhook_url(self.webhook_url):
            logger.warning("slack_webhook_url_invalid")
            self.webhook_url = None

        self.webhook = webhook
        if self.webhook is None and self.webhook_url:
            self.webhook = SlackWebhook(self.webhook_url, timeout=timeout)

    @property
    def channel_name(self) -> str:
        return "slack"

    def is_configured(self) -> bool:
        return bool(self.enabled and self.webhook_url and self.webhook is not None)

    def _post(self, payload: Dict) -> OperationResult:
        self.ensure_configured()
        if not blocks.validate_blocks(payload["blocks"]):
            logger.warning("slack_blocks_invalid", text=payload["text"])
        result = self.webhook.send(text=payload["text"], blocks=payload["blocks"])
        return self.raise_for_result(result)

    def send(self, user: UserSummary, context: DeliveryContext) -> OperationResult:
        if context.message:
            payload = custom_message(user, context.message)
        else:
            payload = summary_message(user, context.date)
        result = self._post(payload)
        logger.info("slack_message_sent", recipient=user.email, custom=bool(context.message))
        return result

    def broadcast(self, message: Optional[str] = None) -> OperationResult:
        """Channel-wide announcement, not addressed to a user.

        Raises:
            ChannelDeliveryError: When not configured or the webhook failed.
        """
        result = self._post(broadcast_message(message))
        logger.info("slack_broadcast_sent")
        return result

    def announce_task(self, item: MondayItem, action: ActionNeeded) -> OperationResult:
        """Announce a created task item.

        Raises:
            ChannelDeliveryError: When not configured or the webhook failed.
        """
        result = self._post(task_message(item, action))
        logger.info("slack_task_announced", item_id=item.id)
        return result
