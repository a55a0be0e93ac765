from dataclasses import dataclass
from enum import Enum

from ..errors import ConfigError


class CommitInfoChoice(Enum):
    """How much commit information to publish after a status message."""
    NONE = ("nothing about commits", False, False)
    AUTHORS = ("commit list with authors only", False, True)
    AUTHORS_AND_TITLES = ("commit list with authors and titles", True, True)

    def __init__(self, label: str, show_title: bool, show_author: bool):
        self.label = label
        self.show_title = show_title
        self.show_author = show_author

    @property
    def show_anything(self) -> bool:
        return self.show_title or self.show_author

    @classmethod
    def from_string(cls, value: str) -> "CommitInfoChoice":
        """Parse a config value such as ``"authors_and_titles"`` or ``"NONE"``."""
        key = (value or "none").strip().upper().replace("-", "_").replace("+", "_AND_")
        if key in ("TITLE_AND_AUTHORS", "TITLES_AND_AUTHORS"):
            key = "AUTHORS_AND_TITLES"
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(c.name.lower() for c in cls)
            raise ConfigError(f"Unknown commit info choice {value!r} (expected one of: {choices})")


@dataclass(frozen=True)
class NotificationPreferences:
    """Immutable snapshot of the user's notification settings."""

    notify_aborted: bool = False
    notify_failure: bool = True
    notify_repeated_failure: bool = False
    notify_not_built: bool = False
    notify_back_to_normal: bool = True
    notify_success: bool = False
    notify_unstable: bool = False
    commit_info_choice: CommitInfoChoice = CommitInfoChoice.NONE
    include_test_summary: bool = False
    include_custom_message: bool = False
    custom_message: str = ""
    build_server_url: str = ""

    def __post_init__(self):
        url = self.build_server_url
        if url and not url.endswith("/"):
            object.__setattr__(self, "build_server_url", url + "/")

    def build_url(self, suffix: str) -> str:
        """Absolute URL of a build given its server-relative suffix."""
        return self.build_server_url + suffix
