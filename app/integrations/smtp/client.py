"""SMTP mail transport.

Sends multipart (plain text + HTML) messages through an authenticated SMTP
server, upgrading the connection with STARTTLS when configured.

Usage:
    transport = SMTPTransport(host="smtp.gmail.com", port=587, user=u, password=p)
    result = transport.send_mail(
        from_addr="Space Optimization <ops@example.com>",
        to="jane@example.com",
        subject="Hello",
        text="plain body",
        html="<p>html body</p>",
    )
"""

import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import structlog

from infrastructure.operations import OperationResult, classify_smtp_error

logger = structlog.get_logger()


class SMTPTransport:
    """Connection parameters for one SMTP server.

    A new connection is opened per message.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: Optional[str],
        password: Optional[str],
        use_tls: bool = True,
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(
        self, from_addr: str, to: str, subject: str, text: str, html: str
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = from_addr
        msg["To"] = to
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def send_mail(
        self, from_addr: str, to: str, subject: str, text: str, html: str
    ) -> OperationResult:
        """Send one message.

        Returns:
            OperationResult: SUCCESS, or an error classified from the smtplib
            or socket exception.
        """
        msg = self.build_message(from_addr, to, subject, text, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            result = classify_smtp_error(e)
            logger.error(
                "smtp_send_failed",
                recipient=to,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        logger.debug("smtp_message_sent", recipient=to, subject=subject)
        return OperationResult.success(data={"recipient": to})
