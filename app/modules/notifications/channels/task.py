"""Task delivery channel (Monday.com).

Creates a board item for users whose reservation pattern warrants follow-up
and announces it on Slack. Users needing no action are skipped.
"""

from typing import Optional

import structlog

from infrastructure.configuration.integrations.monday import MondaySettings
from infrastructure.operations import OperationResult
from integrations.monday import MondayAPIError, MondayClient
from modules.notifications.actions import (
    determine_action_needed,
    snapshot_for_user,
    task_column_values,
)
from modules.notifications.channels.base import DeliveryChannel
from modules.notifications.channels.slack import SlackChannel
from modules.notifications.errors import ChannelDeliveryError
from modules.notifications.models import DeliveryContext
from modules.reservations.models import UserSummary

logger = structlog.get_logger()


class TaskChannel(DeliveryChannel):
    """Monday.com task creation."""

    def __init__(
        self,
        settings: MondaySettings,
        timeout: int = 10,
        client: Optional[MondayClient] = None,
        announcer: Optional[SlackChannel] = None,
    ):
        self.settings = settings
        self.announcer = announcer
        self.client = client
        if self.client is None and settings.MONDAY_API_KEY:
            self.client = MondayClient(
                api_key=settings.MONDAY_API_KEY,
                api_url=settings.MONDAY_API_URL,
                timeout=timeout,
            )

    @property
    def channel_name(self) -> str:
        return "task"

    def is_configured(self) -> bool:
        return bool(
            self.settings.MONDAY_API_KEY
            and self.settings.MONDAY_BOARD_ID
            and self.client is not None
        )

    def send(self, user: UserSummary, context: DeliveryContext) -> OperationResult:
        self.ensure_configured()

        action = determine_action_needed(snapshot_for_user(user))
        if not action.required:
            logger.debug("task_not_needed", recipient=user.email)
            return OperationResult.skipped("No task needed", data=action.model_dump())

        try:
            item = self.client.create_item(
                board_id=str(self.settings.MONDAY_BOARD_ID),
                item_name=f"Cubicle Sequence Alert: {user.name}",
                column_values=task_column_values(user, action),
            )
        except MondayAPIError as e:
            error_code = e.result.error_code if e.result else "MONDAY_ERROR"
            raise ChannelDeliveryError(self.channel_name, e.message, error_code) from e

        logger.info(
            "task_created", recipient=user.email, item_id=item.id, urgency=action.urgency
        )
        self._announce(item, action)
        return OperationResult.success(
            data={"item_id": item.id, "url": item.url, "urgency": action.urgency},
            message=f"Task created for {user.email}",
        )

    def _announce(self, item, action) -> None:
        if self.announcer is None or not self.announcer.is_configured():
            return
        try:
            self.announcer.announce_task(item, action)
        except ChannelDeliveryError as e:
            logger.error("task_announcement_failed", item_id=item.id, error=e.message)
