"""SMTP integration settings."""

from typing import Any

import structlog
from pydantic import Field, field_validator

from infrastructure.configuration.base import IntegrationSettings

logger = structlog.get_logger()

DEFAULT_SMTP_PORT = 587


class SmtpSettings(IntegrationSettings):
    """Outbound mail server configuration.

    Environment Variables:
        SMTP_HOST: Mail server host (default: smtp.gmail.com)
        SMTP_PORT: Mail server port (default: 587, invalid values fall back to 587)
        SMTP_USER: Login user, also used as the sender address
        SMTP_PASSWORD: Login password
        SMTP_USE_TLS: Upgrade the connection with STARTTLS (default: True)
        SMTP_FROM_NAME: Display name used in the From header

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.smtp.has_credentials:
            host = settings.smtp.SMTP_HOST
        ```
    """

    SMTP_HOST: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=DEFAULT_SMTP_PORT, alias="SMTP_PORT")
    SMTP_USER: str | None = Field(default=None, alias="SMTP_USER")
    SMTP_PASSWORD: str | None = Field(default=None, alias="SMTP_PASSWORD")
    SMTP_USE_TLS: bool = Field(default=True, alias="SMTP_USE_TLS")
    SMTP_FROM_NAME: str = Field(default="Space Optimization", alias="SMTP_FROM_NAME")

    @field_validator("SMTP_PORT", mode="before")
    @classmethod
    def validate_port(cls, v: Any) -> int:
        """Fall back to the default port when the configured one is not a number."""
        if v is None or v == "":
            return DEFAULT_SMTP_PORT
        try:
            return int(v)
        except (TypeError, ValueError):
            logger.warning("invalid_smtp_port", value=v, fallback=DEFAULT_SMTP_PORT)
            return DEFAULT_SMTP_PORT

    @property
    def has_credentials(self) -> bool:
        """True when both user and password are set."""
        return bool(self.SMTP_USER and self.SMTP_PASSWORD)
