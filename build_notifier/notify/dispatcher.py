"""
Notification Dispatch

Turns build lifecycle events into published notifications.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..environment import EnvironmentResolver
from ..models.build import BuildRecord
from ..models.preferences import NotificationPreferences
from ..monitoring.sentry import add_breadcrumb, capture_exception, set_build_context
from ..repository import BuildRepository
from .changes import ChangeSummarizer
from .classifier import ResultMessageType, build_color, classify_build
from .formatter import MessageFormatter
from .sink import NotificationSink


@dataclass(frozen=True)
class BuildStarted:
    """A build has started running."""
    build: BuildRecord


@dataclass(frozen=True)
class BuildCompleted:
    """A build has finished with a result."""
    build: BuildRecord


LifecycleEvent = Union[BuildStarted, BuildCompleted]


class NotificationDispatcher:
    """
    Classifies, formats and publishes notifications for lifecycle events.

    Holds no per-build state, so one dispatcher can serve concurrent events.

    Usage:
        dispatcher = NotificationDispatcher(preferences, formatter, SlackSink(config))
        dispatcher.dispatch(BuildCompleted(build))
    """

    def __init__(
        self,
        preferences: NotificationPreferences,
        formatter: MessageFormatter,
        sink: NotificationSink,
        logger: Optional[logging.Logger] = None,
    ):
        self.preferences = preferences
        self.formatter = formatter
        self.sink = sink
        self.logger = logger or logging.getLogger(__name__)

    def dispatch(self, event: LifecycleEvent) -> List[Tuple[str, str]]:
        """
        Handle one lifecycle event.

        Returns:
            The (text, color) pairs handed to the sink, in publish order
        """
        if isinstance(event, BuildStarted):
            return self.started(event.build)
        if isinstance(event, BuildCompleted):
            return self.completed(event.build)
        raise TypeError(f"Unsupported lifecycle event: {event!r}")

    def started(self, build: BuildRecord) -> List[Tuple[str, str]]:
        """Announce a started build, coloured by the previous completed build."""
        set_build_context(build.project_full_name, build.number, "started")

        text = self.formatter.start_message(build)
        previous = build.previous_completed_build
        color = "good" if previous is None else build_color(previous.result)

        self._publish(build, text, color)
        return [(text, color)]

    def completed(self, build: BuildRecord) -> List[Tuple[str, str]]:
        """Report a completed build, followed by its commits when enabled."""
        result = build.result.value if build.result else None
        set_build_context(build.project_full_name, build.number, "completed", result)

        message_type = classify_build(build, self.preferences)
        if message_type == ResultMessageType.NO_MESSAGE:
            self.logger.info(
                "No notification for %s %s (result %s)",
                build.project_full_name,
                build.display_name,
                result,
            )
            return []

        color = build_color(build.result)
        status = self.formatter.status_message(message_type, build)
        self._publish(build, status, color)
        messages = [(status, color)]

        # The commit list may follow upstream causes and raise; the status is already out
        if self.preferences.commit_info_choice.show_anything:
            commits = self.formatter.commit_message(build)
            self._publish(build, commits, color)
            messages.append((commits, color))
        return messages

    def _publish(self, build: BuildRecord, text: str, color: str) -> bool:
        """Hand one message to the sink. Sink failures are logged, never raised."""
        try:
            delivered = self.sink.publish(text, color)
        except Exception as e:
            self.logger.error(
                "Sink failed to publish notification for %s %s: %s",
                build.project_full_name,
                build.display_name,
                e,
                exc_info=True,
            )
            capture_exception(
                exception=e,
                tags={"project": build.project_full_name},
                extra={"build": build.number, "color": color},
            )
            return False

        if not delivered:
            self.logger.warning(
                "Notification for %s %s was not delivered",
                build.project_full_name,
                build.display_name,
            )
        else:
            add_breadcrumb(
                message=f"Published notification for {build.project_full_name} {build.display_name}",
                data={"color": color},
            )
        return bool(delivered)


def create_dispatcher(
    preferences: NotificationPreferences,
    repository: BuildRepository,
    sink: NotificationSink,
    resolver: Optional[EnvironmentResolver] = None,
    logger: Optional[logging.Logger] = None,
) -> NotificationDispatcher:
    """Wire a dispatcher with the default summarizer and formatter."""
    summarizer = ChangeSummarizer(preferences, repository, logger=logger)
    formatter = MessageFormatter(preferences, summarizer, resolver=resolver, logger=logger)
    return NotificationDispatcher(preferences, formatter, sink, logger=logger)
