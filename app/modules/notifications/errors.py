"""Notification error taxonomy."""

from typing import Optional


class NotificationError(Exception):
    """Base class for notification errors."""


class NotificationValidationError(NotificationError, ValueError):
    """Invalid input, raised before any side effect.

    Covers missing user ids, malformed day filters, unknown broadcast types,
    unknown custom channels and empty custom messages.
    """


class UserNotFoundError(NotificationError):
    """No reservations exist for the requested user (and day)."""

    def __init__(self, user_id: str, date: Optional[str] = None):
        self.user_id = user_id
        self.date = date
        message = f"User not found or no reservations: {user_id}"
        if date:
            message += f" on {date}"
        super().__init__(message)


class ChannelDeliveryError(NotificationError):
    """A single channel failed to deliver to a single recipient."""

    def __init__(
        self,
        channel: str,
        message: str,
        error_code: Optional[str] = None,
    ):
        self.channel = channel
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class AuditWriteError(NotificationError):
    """The history store could not persist a notification attempt."""
