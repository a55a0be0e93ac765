"""
Notifier Configuration

Loads Slack, Sentry and notification settings from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from .errors import ConfigError
from .models.preferences import CommitInfoChoice, NotificationPreferences


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _env_number(name: str, default: str, cast):
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


@dataclass
class NotifierConfig:
    """Configuration for the notifier and its delivery/monitoring services."""

    # Slack settings
    slack_webhook_url: Optional[str] = field(default=None)
    slack_channel: Optional[str] = None
    slack_username: Optional[str] = None
    slack_icon_emoji: Optional[str] = None
    slack_timeout: int = 10
    slack_max_retries: int = 3

    # Which results to announce
    notify_aborted: bool = False
    notify_failure: bool = True
    notify_repeated_failure: bool = False
    notify_not_built: bool = False
    notify_back_to_normal: bool = True
    notify_success: bool = False
    notify_unstable: bool = False

    # Message content
    commit_info_choice: CommitInfoChoice = CommitInfoChoice.NONE
    include_test_summary: bool = False
    include_custom_message: bool = False
    custom_message: str = ""
    build_server_url: str = ""

    # Sentry settings
    sentry_dsn: Optional[str] = field(default=None)
    sentry_environment: str = "production"
    sentry_traces_sample_rate: float = 0.0

    @classmethod
    def from_env(cls) -> "NotifierConfig":
        """Create config from environment variables."""
        return cls(
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL"),
            slack_channel=os.getenv("SLACK_CHANNEL"),
            slack_username=os.getenv("SLACK_USERNAME"),
            slack_icon_emoji=os.getenv("SLACK_ICON_EMOJI"),
            slack_timeout=_env_number("SLACK_TIMEOUT", "10", int),
            slack_max_retries=_env_number("SLACK_MAX_RETRIES", "3", int),
            notify_aborted=_env_flag("NOTIFY_ABORTED", False),
            notify_failure=_env_flag("NOTIFY_FAILURE", True),
            notify_repeated_failure=_env_flag("NOTIFY_REPEATED_FAILURE", False),
            notify_not_built=_env_flag("NOTIFY_NOT_BUILT", False),
            notify_back_to_normal=_env_flag("NOTIFY_BACK_TO_NORMAL", True),
            notify_success=_env_flag("NOTIFY_SUCCESS", False),
            notify_unstable=_env_flag("NOTIFY_UNSTABLE", False),
            commit_info_choice=CommitInfoChoice.from_string(os.getenv("COMMIT_INFO", "none")),
            include_test_summary=_env_flag("INCLUDE_TEST_SUMMARY", False),
            include_custom_message=_env_flag("INCLUDE_CUSTOM_MESSAGE", False),
            custom_message=os.getenv("CUSTOM_MESSAGE", ""),
            build_server_url=os.getenv("BUILD_SERVER_URL", ""),
            sentry_dsn=os.getenv("SENTRY_DSN"),
            sentry_environment=os.getenv("SENTRY_ENVIRONMENT", "production"),
            sentry_traces_sample_rate=_env_number("SENTRY_TRACES_SAMPLE_RATE", "0.0", float),
        )

    @property
    def slack_enabled(self) -> bool:
        """Check if Slack notifications are configured."""
        return bool(self.slack_webhook_url)

    @property
    def sentry_enabled(self) -> bool:
        """Check if Sentry tracking is configured."""
        return bool(self.sentry_dsn)

    def preferences(self) -> NotificationPreferences:
        """Immutable snapshot of the notification settings."""
        return NotificationPreferences(
            notify_aborted=self.notify_aborted,
            notify_failure=self.notify_failure,
            notify_repeated_failure=self.notify_repeated_failure,
            notify_not_built=self.notify_not_built,
            notify_back_to_normal=self.notify_back_to_normal,
            notify_success=self.notify_success,
            notify_unstable=self.notify_unstable,
            commit_info_choice=self.commit_info_choice,
            include_test_summary=self.include_test_summary,
            include_custom_message=self.include_custom_message,
            custom_message=self.custom_message,
            build_server_url=self.build_server_url,
        )
