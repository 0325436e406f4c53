"""Cubicle notification service configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    AwsSettings,
    MondaySettings,
    SlackSettings,
    SmtpSettings,
)

# Feature settings
from infrastructure.configuration.features import NotificationFeatureSettings


class Settings(BaseSettings):
    """Configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object
    built once at startup and injected into channels and transports:

    - **Integrations**: SMTP, Slack webhook, Monday.com, AWS (DynamoDB)
    - **Features**: notification delivery switches and timeouts

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        smtp_host = settings.smtp.SMTP_HOST
        timeout = settings.notifications.REQUEST_TIMEOUT_SECONDS
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    smtp: SmtpSettings
    slack: SlackSettings
    monday: MondaySettings
    aws: AwsSettings

    # Feature settings
    notifications: NotificationFeatureSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "smtp": SmtpSettings,
            "slack": SlackSettings,
            "monday": MondaySettings,
            "aws": AwsSettings,
            # Features
            "notifications": NotificationFeatureSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
