"""Slack incoming webhook transport.

Posts messages to a single incoming webhook URL through slack_sdk's
WebhookClient. Only https URLs on Slack (or Slack-compatible Discord)
hosts are accepted.

Usage:
    from integrations.slack.webhook import SlackWebhook, is_valid_webhook_url

    if is_valid_webhook_url(url):
        result = SlackWebhook(url, timeout=10).send(text="hello", blocks=blocks)
"""

from typing import Dict, List, Optional
from urllib.parse import urlparse

import structlog
from slack_sdk.webhook import WebhookClient

from infrastructure.operations import OperationResult, classify_http_status

logger = structlog.get_logger()

ALLOWED_WEBHOOK_HOSTS = ("slack.com", "discord.com")


def is_valid_webhook_url(url: Optional[str]) -> bool:
    """Return True when the URL is https and its host is a known webhook host.

    Hosts match exactly or as a subdomain (hooks.slack.com).
    """
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme != "https" or not parsed.hostname:
        return False
    host = parsed.hostname.lower()
    return any(
        host == allowed or host.endswith("." + allowed)
        for allowed in ALLOWED_WEBHOOK_HOSTS
    )


class SlackWebhook:
    """A single Slack incoming webhook."""

    def __init__(self, url: str, timeout: int = 10):
        self.url = url
        self.timeout = timeout
        self._client = WebhookClient(url, timeout=timeout)

    def send(
        self,
        text: str,
        blocks: Optional[List[Dict]] = None,
        attachments: Optional[List[Dict]] = None,
    ) -> OperationResult:
        """Post a message to the webhook.

        Args:
            text: Fallback text shown in notifications.
            blocks: Optional Block Kit blocks.
            attachments: Optional legacy attachments.

        Returns:
            OperationResult: SUCCESS with the HTTP status as data, or an error
            result classified from the HTTP status or the raised exception.
        """
        try:
            response = self._client.send(
                text=text, blocks=blocks, attachments=attachments
            )
        except Exception as e:  # pylint: disable=broad-except
            logger.error("slack_webhook_request_failed", error=str(e))
            return OperationResult.transient_error(
                f"Slack webhook request failed: {str(e)}",
                error_code="CONNECTION_ERROR",
            )

        if 200 <= response.status_code < 300:
            logger.debug("slack_webhook_sent", status_code=response.status_code)
            return OperationResult.success(data={"status_code": response.status_code})

        logger.warning(
            "slack_webhook_rejected",
            status_code=response.status_code,
            body=response.body,
        )
        return classify_http_status(response.status_code, "Slack")
