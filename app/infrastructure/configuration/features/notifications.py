"""Notification feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class NotificationFeatureSettings(FeatureSettings):
    """Notification delivery behaviour.

    Environment Variables:
        NOTIFICATIONS_ENABLED: Global switch for Slack delivery (default: False)
        REQUEST_TIMEOUT_SECONDS: Bound on every outbound call (default: 10)
        FRONTEND_URL: Base URL used for links in messages

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.notifications.NOTIFICATIONS_ENABLED:
            timeout = settings.notifications.REQUEST_TIMEOUT_SECONDS
        ```
    """

    NOTIFICATIONS_ENABLED: bool = Field(default=False, alias="NOTIFICATIONS_ENABLED")
    REQUEST_TIMEOUT_SECONDS: int = Field(default=10, alias="REQUEST_TIMEOUT_SECONDS")
    FRONTEND_URL: str = Field(default="http://localhost:8080", alias="FRONTEND_URL")
