"""
Slack Notification Client

Sends colour-coded attachment messages to a Slack incoming webhook.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ...config import NotifierConfig
from ...notify.sink import NotificationSink
from ..retry import RetryStrategy
from ..sentry import add_breadcrumb

logger = logging.getLogger(__name__)


def build_payload(
    text: str,
    color: str,
    channel: Optional[str] = None,
    username: Optional[str] = None,
    icon_emoji: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the webhook payload for one message.

    Args:
        text: Message text (already escaped)
        color: Attachment colour ("good", "danger", "warning")
        channel: Optional channel override
        username: Optional bot name override
        icon_emoji: Optional bot icon override

    Returns:
        JSON-serialisable payload
    """
    payload: Dict[str, Any] = {
        "attachments": [
            {
                "fallback": text,
                "color": color,
                "text": text,
                "mrkdwn_in": ["text"],
            }
        ],
    }
    if channel:
        payload["channel"] = channel
    if username:
        payload["username"] = username
    if icon_emoji:
        payload["icon_emoji"] = icon_emoji
    return payload


class SlackSink(NotificationSink):
    """
    Publishes notifications to Slack via an incoming webhook.

    Usage:
        config = NotifierConfig.from_env()
        sink = SlackSink(config)
        sink.publish("app - #5 Build <url|#5> of app passed after 3 min", "good")
    """

    def __init__(
        self,
        config: Optional[NotifierConfig] = None,
        retry: Optional[RetryStrategy] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Slack sink.

        Args:
            config: NotifierConfig with webhook URL
            retry: Retry strategy for failed POSTs (defaults from config)
            session: HTTP session to post with
        """
        self.config = config or NotifierConfig.from_env()
        self._webhook_url = self.config.slack_webhook_url
        self.retry = retry or RetryStrategy(max_retries=self.config.slack_max_retries)
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        """Check if Slack notifications are enabled."""
        return bool(self._webhook_url)

    def _post(self, payload: Dict[str, Any]) -> None:
        response = self.session.post(
            self._webhook_url,
            json=payload,
            timeout=self.config.slack_timeout,
        )
        response.raise_for_status()

    def publish(self, text: str, color: str) -> bool:
        """
        Send one message.

        Returns:
            True if sent successfully
        """
        if not self.enabled:
            logger.debug("Slack not configured, skipping notification")
            return False

        payload = build_payload(
            text,
            color,
            channel=self.config.slack_channel,
            username=self.config.slack_username,
            icon_emoji=self.config.slack_icon_emoji,
        )

        try:
            self.retry.execute(lambda: self._post(payload))
        except requests.RequestException as e:
            logger.error("Failed to send Slack notification: %s", e)
            return False

        add_breadcrumb(message="Slack notification sent", category="slack", data={"color": color})
        logger.debug("Slack notification sent successfully")
        return True
