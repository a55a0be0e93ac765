"""Notification core: classification, message formatting and dispatch."""

from .changes import ChangeSummarizer
from .classifier import (
    BuildStatus,
    ResultMessageType,
    build_color,
    build_status,
    classify,
    classify_build,
    effective_previous_result,
)
from .dispatcher import (
    BuildCompleted,
    BuildStarted,
    NotificationDispatcher,
    create_dispatcher,
)
from .formatter import MessageFormatter, start_cause
from .sink import MockNotificationSink, NotificationSink

__all__ = [
    'ChangeSummarizer',
    'BuildStatus',
    'ResultMessageType',
    'build_color',
    'build_status',
    'classify',
    'classify_build',
    'effective_previous_result',
    'BuildCompleted',
    'BuildStarted',
    'NotificationDispatcher',
    'create_dispatcher',
    'MessageFormatter',
    'start_cause',
    'MockNotificationSink',
    'NotificationSink',
]
