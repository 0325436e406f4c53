"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.aws import AwsSettings
from infrastructure.configuration.integrations.monday import MondaySettings
from infrastructure.configuration.integrations.slack import SlackSettings
from infrastructure.configuration.integrations.smtp import SmtpSettings

__all__ = [
    "AwsSettings",
    "MondaySettings",
    "SlackSettings",
    "SmtpSettings",
]
