"""Email delivery channel.

Renders the reservation summary (or a custom message) as plain text and
HTML and sends it through the SMTP transport.
"""

from datetime import date as date_type, datetime
from email.utils import formataddr
from html import escape
from typing import Optional, Tuple

import structlog

from infrastructure.configuration.integrations.smtp import SmtpSettings
from infrastructure.operations import OperationResult
from integrations.smtp import SMTPTransport
from modules.notifications.channels.base import DeliveryChannel
from modules.notifications.models import DeliveryContext
from modules.reservations.models import UserSummary

logger = structlog.get_logger()

SERVICE_NAME = "Space Optimization"


def format_long_date(value: str) -> str:
    """`2024-12-15` -> `Sunday, December 15, 2024`."""
    day = date_type.fromisoformat(value)
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def _generated_on() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M")


def render_summary(
    user: UserSummary, frontend_url: str, date: Optional[str] = None
) -> Tuple[str, str, str]:
    """Subject, text and HTML bodies for a reservation summary."""
    date_context = f" for {format_long_date(date)}" if date else ""
    subject = f"Your Cubicle Reservation Summary{date_context} - {SERVICE_NAME}"
    link = f"{frontend_url.rstrip('/')}/reservations"
    sequence = user.cubicle_sequence or "No reservations found"
    favorite = user.favorite_section or "N/A"

    text = "\n".join(
        [
            f"{SERVICE_NAME} - Cubicle Reservation Summary{date_context}",
            "",
            f"Hello {user.name}!",
            "",
            "Your Reservation Summary:",
            f"- Total Reservations: {user.total_reservations}",
            f"- Days Active: {user.days_active}",
            f"- Favorite Section: {favorite}",
            f"- Avg Daily Reservations: {user.avg_daily_reservations}",
            "",
            "Your Cubicle Sequence:",
            sequence,
            "",
            f"Visit {link} to view your current reservations.",
            "",
            f"This is an automated message from the {SERVICE_NAME} system.",
            f"Generated on {_generated_on()}",
        ]
    )

    date_notice = ""
    if date:
        date_notice = (
            "<p><strong>Date-Specific Report:</strong> This summary shows your "
            f"reservations for {escape(format_long_date(date))}.</p>"
        )
    html = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Cubicle Reservation Summary</title></head>
<body>
  <h1>{SERVICE_NAME}</h1>
  <p>Your Cubicle Reservation Summary{escape(date_context)}</p>
  <h2>Hello {escape(user.name)}!</h2>
  {date_notice}
  <h3>Reservation Summary</h3>
  <table>
    <tr><td>Total Reservations:</td><td>{user.total_reservations}</td></tr>
    <tr><td>Days Active:</td><td>{user.days_active}</td></tr>
    <tr><td>Favorite Section:</td><td>{escape(favorite)}</td></tr>
    <tr><td>Avg Daily Reservations:</td><td>{user.avg_daily_reservations}</td></tr>
  </table>
  <h3>Your Cubicle Sequence</h3>
  <pre>{escape(sequence)}</pre>
  <p>Sequential cubicles in the same row are shown as ranges (e.g. A1-SOC CUB1-A1-SOC CUB3).</p>
  <p><a href="{escape(link)}">View Current Reservations</a></p>
  <p>This is an automated message from the {SERVICE_NAME} system. Generated on {_generated_on()}</p>
</body>
</html>"""
    return subject, text, html


def render_custom(user: UserSummary, message: str) -> Tuple[str, str, str]:
    """Subject, text and HTML bodies for a custom message."""
    subject = f"Custom Notification - {SERVICE_NAME}"
    text = "\n".join(
        [
            f"{SERVICE_NAME} - Custom Notification",
            "",
            f"Hello {user.name}!",
            "",
            message,
            "",
            f"This is an automated message from the {SERVICE_NAME} system.",
        ]
    )
    body = escape(message).replace("\n", "<br>")
    html = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Custom Notification</title></head>
<body>
  <h1>{SERVICE_NAME}</h1>
  <h2>Hello {escape(user.name)}!</h2>
  <p>{body}</p>
  <p>This is an automated message from the {SERVICE_NAME} system.</p>
</body>
</html>"""
    return subject, text, html


class EmailChannel(DeliveryChannel):
    """SMTP email delivery."""

    def __init__(
        self,
        settings: SmtpSettings,
        frontend_url: str,
        timeout: int = 10,
        transport: Optional[SMTPTransport] = None,
    ):
        self.settings = settings
        self.frontend_url = frontend_url
        self.transport = transport or SMTPTransport(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            timeout=timeout,
        )
        if not self.is_configured():
            logger.warning("email_channel_not_configured")

    @property
    def channel_name(self) -> str:
        return "email"

    def is_configured(self) -> bool:
        return self.settings.has_credentials

    @property
    def from_address(self) -> str:
        return formataddr((self.settings.SMTP_FROM_NAME, self.settings.SMTP_USER or ""))

    def send(self, user: UserSummary, context: DeliveryContext) -> OperationResult:
        self.ensure_configured()
        if context.message:
            subject, text, html = render_custom(user, context.message)
        else:
            subject, text, html = render_summary(user, self.frontend_url, context.date)

        result = self.transport.send_mail(
            from_addr=self.from_address,
            to=user.email,
            subject=subject,
            text=text,
            html=html,
        )
        self.raise_for_result(result)
        logger.info("email_sent", recipient=user.email, custom=bool(context.message))
        return result
