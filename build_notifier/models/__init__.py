"""Data models - Dataclass definitions for builds and notification settings."""

from .build import (
    BuildRecord,
    BuildResult,
    Cause,
    CauseKind,
    ChangeEntry,
    TestSummary,
)
from .preferences import CommitInfoChoice, NotificationPreferences

__all__ = [
    'BuildRecord',
    'BuildResult',
    'Cause',
    'CauseKind',
    'ChangeEntry',
    'TestSummary',
    'CommitInfoChoice',
    'NotificationPreferences',
]
