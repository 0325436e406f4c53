"""SMTP mail transport."""

from integrations.smtp.client import SMTPTransport

__all__ = ["SMTPTransport"]
