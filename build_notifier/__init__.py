"""Build Notifier - Slack notifications for build lifecycle events.

Modules:
    models - Build records and notification preferences (dataclasses)
    notify - Result classification, message formatting and dispatch
    helpers - Pure text and duration utilities
    repository - Build lookup and JSON history loading
    environment - Custom message variable resolution
    monitoring - Slack delivery and Sentry error tracking
    config - Configuration
"""

from .config import NotifierConfig
from .models import BuildRecord, BuildResult, NotificationPreferences
from .notify import (
    BuildCompleted,
    BuildStarted,
    NotificationDispatcher,
    ResultMessageType,
    create_dispatcher,
)

__all__ = [
    'NotifierConfig',
    'BuildRecord',
    'BuildResult',
    'NotificationPreferences',
    'BuildCompleted',
    'BuildStarted',
    'NotificationDispatcher',
    'ResultMessageType',
    'create_dispatcher',
]

__version__ = '1.0.0'
