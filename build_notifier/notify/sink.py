"""Notification Sink - Interface for delivering formatted messages."""

from abc import ABC, abstractmethod
from typing import List, Tuple


class NotificationSink(ABC):
    """Abstract delivery channel for notification text."""

    @abstractmethod
    def publish(self, text: str, color: str) -> bool:
        """
        Deliver one message.

        Args:
            text: Message text with Slack link markup
            color: "good", "danger" or "warning"

        Returns:
            True if the message was delivered
        """
        pass


class MockNotificationSink(NotificationSink):
    """In-memory sink for testing."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []
        self._outcome = True

    def publish(self, text: str, color: str) -> bool:
        self.messages.append((text, color))
        return self._outcome

    def set_outcome(self, value: bool) -> None:
        """Test helper to control the publish result."""
        self._outcome = value
