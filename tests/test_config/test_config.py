"""Tests for NotifierConfig and preference parsing."""

import pytest

from build_notifier.config import NotifierConfig
from build_notifier.errors import ConfigError
from build_notifier.models import CommitInfoChoice, NotificationPreferences

ENV_VARS = [
    "SLACK_WEBHOOK_URL", "SLACK_CHANNEL", "SLACK_TIMEOUT", "SLACK_MAX_RETRIES",
    "NOTIFY_ABORTED", "NOTIFY_FAILURE", "NOTIFY_REPEATED_FAILURE", "NOTIFY_NOT_BUILT",
    "NOTIFY_BACK_TO_NORMAL", "NOTIFY_SUCCESS", "NOTIFY_UNSTABLE", "COMMIT_INFO",
    "INCLUDE_TEST_SUMMARY", "INCLUDE_CUSTOM_MESSAGE", "CUSTOM_MESSAGE", "BUILD_SERVER_URL",
    "SENTRY_DSN", "SENTRY_TRACES_SAMPLE_RATE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    def test_defaults(self):
        config = NotifierConfig.from_env()
        assert not config.slack_enabled
        assert not config.sentry_enabled
        assert config.notify_failure
        assert config.notify_back_to_normal
        assert not config.notify_success
        assert config.commit_info_choice == CommitInfoChoice.NONE

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/T/B/X")
        monkeypatch.setenv("SLACK_CHANNEL", "#builds")
        monkeypatch.setenv("NOTIFY_SUCCESS", "yes")
        monkeypatch.setenv("NOTIFY_FAILURE", "false")
        monkeypatch.setenv("COMMIT_INFO", "authors_and_titles")
        monkeypatch.setenv("INCLUDE_CUSTOM_MESSAGE", "1")
        monkeypatch.setenv("CUSTOM_MESSAGE", "Deployed $BRANCH")
        monkeypatch.setenv("BUILD_SERVER_URL", "https://ci.example.com")
        monkeypatch.setenv("SLACK_MAX_RETRIES", "5")

        config = NotifierConfig.from_env()
        assert config.slack_enabled
        assert config.slack_channel == "#builds"
        assert config.slack_max_retries == 5

        prefs = config.preferences()
        assert prefs.notify_success
        assert not prefs.notify_failure
        assert prefs.commit_info_choice == CommitInfoChoice.AUTHORS_AND_TITLES
        assert prefs.include_custom_message
        assert prefs.custom_message == "Deployed $BRANCH"
        assert prefs.build_server_url == "https://ci.example.com/"

    def test_invalid_flag(self, monkeypatch):
        monkeypatch.setenv("NOTIFY_SUCCESS", "sometimes")
        with pytest.raises(ConfigError, match="NOTIFY_SUCCESS"):
            NotifierConfig.from_env()

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("SLACK_TIMEOUT", "ten")
        with pytest.raises(ConfigError, match="SLACK_TIMEOUT"):
            NotifierConfig.from_env()


class TestCommitInfoChoice:
    @pytest.mark.parametrize("value, expected", [
        ("none", CommitInfoChoice.NONE),
        ("AUTHORS", CommitInfoChoice.AUTHORS),
        ("authors-and-titles", CommitInfoChoice.AUTHORS_AND_TITLES),
        ("TITLE+AUTHORS", CommitInfoChoice.AUTHORS_AND_TITLES),
    ])
    def test_from_string(self, value, expected):
        assert CommitInfoChoice.from_string(value) == expected

    def test_unknown(self):
        with pytest.raises(ConfigError):
            CommitInfoChoice.from_string("everything")

    def test_flags(self):
        assert not CommitInfoChoice.NONE.show_anything
        assert CommitInfoChoice.AUTHORS.show_author and not CommitInfoChoice.AUTHORS.show_title
        assert CommitInfoChoice.AUTHORS_AND_TITLES.show_title


class TestPreferences:
    def test_server_url_gets_trailing_slash(self):
        prefs = NotificationPreferences(build_server_url="https://ci.example.com")
        assert prefs.build_url("job/app/1/") == "https://ci.example.com/job/app/1/"

    def test_empty_server_url(self):
        assert NotificationPreferences().build_url("job/app/1/") == "job/app/1/"

    def test_immutable(self):
        prefs = NotificationPreferences()
        with pytest.raises(AttributeError):
            prefs.notify_success = True
