"""Slack integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SlackSettings(IntegrationSettings):
    """Slack incoming-webhook configuration.

    Environment Variables:
        SLACK_WEBHOOK_URL: Incoming webhook URL (https, slack.com or discord.com host)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        webhook_url = settings.slack.SLACK_WEBHOOK_URL
        ```
    """

    SLACK_WEBHOOK_URL: str | None = Field(default=None, alias="SLACK_WEBHOOK_URL")
