"""
Message Formatting

Composes the Slack text for build start and build completion events.

Every fragment that comes from a project, a build, a commit or a custom
template goes through escape(); link markup produced here does not.
"""

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..environment import EnvironmentResolver, expand_macros
from ..helpers.escape import escape, link
from ..helpers.timespan import format_timespan
from ..models.build import BuildRecord, Cause
from ..models.preferences import NotificationPreferences
from ..monitoring.sentry import capture_exception
from .changes import ChangeSummarizer
from .classifier import BuildStatus, ResultMessageType, build_status

# Build variables set by the GitHub pull request builder
SOURCE_BRANCH_VAR = "ghprbSourceBranch"
PULL_ID_VAR = "ghprbPullId"
PULL_LINK_VAR = "ghprbPullLink"
PULL_AUTHOR_VAR = "ghprbActualCommitAuthor"

RESULT_VERBS = {
    ResultMessageType.SUCCESS: "passed",
    ResultMessageType.BACK_TO_NORMAL: "passed",
    ResultMessageType.FAILURE: "failed",
    ResultMessageType.REPEATED_FAILURE: "failed",
    ResultMessageType.ABORTED: "aborted",
    ResultMessageType.NOT_BUILT: "failed to build",
    ResultMessageType.UNSTABLE: "is unstable",
}
UNKNOWN_VERB = "something weird happened"

NO_TESTS = "\nNo Tests found."


def start_cause(build: BuildRecord) -> Optional[Cause]:
    """
    The trigger cause to announce a build with, if any.

    Builds triggered by an SCM change are announced by their changes instead,
    so any SCM cause disqualifies the build.
    """
    if any(cause.is_scm for cause in build.causes):
        return None
    for cause in build.causes:
        if cause.description:
            return cause
    return None


class MessageFormatter:
    """
    Builds notification text for one set of preferences.

    Usage:
        formatter = MessageFormatter(preferences, ChangeSummarizer(preferences, repo))
        text = formatter.status_message(ResultMessageType.FAILURE, build)
    """

    def __init__(
        self,
        preferences: NotificationPreferences,
        summarizer: ChangeSummarizer,
        resolver: Optional[EnvironmentResolver] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            preferences: Notification settings
            summarizer: Renders change sets
            resolver: Environment for custom messages (empty when None)
            logger: Logger for resolution failures
            clock: Current time for running builds' durations
        """
        self.preferences = preferences
        self.summarizer = summarizer
        self.resolver = resolver
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    # Message shapes

    def start_message(self, build: BuildRecord, include_test_summary: bool = False) -> str:
        """
        Text announcing that a build started.

        Uses, in order of preference, the build's trigger cause, a summary of
        its changes, or its status and running time.
        """
        cause = start_cause(build)
        if cause is not None:
            body = escape(cause.description)
        else:
            body = self.summarizer.summarize_for_start(build)
            if body is None:
                status = build_status(build)
                body = f"{escape(status.value)} after {self._status_duration(status, build)}"

        return (
            self.header(build)
            + body
            + self.open_link(build)
            + self._blocks(build, include_test_summary)
        )

    def status_message(self, message_type: ResultMessageType, build: BuildRecord) -> str:
        """
        Text reporting a completed build, e.g.
        ``"app - #5 Build <url|#5> of app triggered by Started by user bob failed after 2 min 3 sec"``.
        """
        variables = build.variables
        message = self.header(build) + "Build " + link(self.build_url(build), f"#{build.number}")

        source_branch = variables.get(SOURCE_BRANCH_VAR)
        if source_branch is not None:
            message += " of " + escape(source_branch)
        else:
            message += " of " + escape(build.project_display_name)
            descriptions = [cause.description for cause in build.causes if cause.description]
            if descriptions:
                message += " triggered by " + escape(", ".join(descriptions))

        pull_id = variables.get(PULL_ID_VAR)
        if pull_id is not None:
            message += (
                " in PR "
                + link(variables.get(PULL_LINK_VAR, ""), "#" + escape(pull_id))
                + " by "
                + escape(variables.get(PULL_AUTHOR_VAR, ""))
            )

        if message_type == ResultMessageType.BACK_TO_NORMAL:
            duration = self.back_to_normal_duration(build)
        else:
            duration = build.duration_string(self._now())

        verb = RESULT_VERBS.get(message_type, UNKNOWN_VERB)
        message += f" {verb} after {duration}"
        return message + self._blocks(build, self.preferences.include_test_summary)

    def commit_message(self, build: BuildRecord) -> str:
        """Header followed by the build's commit list."""
        return self.header(build) + self.summarizer.commit_list(build)

    # Fragments

    def header(self, build: BuildRecord) -> str:
        return f"{escape(build.project_display_name)} - {escape(build.display_name)} "

    def build_url(self, build: BuildRecord) -> str:
        return self.preferences.build_url(build.url)

    def open_link(self, build: BuildRecord) -> str:
        return f" ({link(self.build_url(build), 'Open')})"

    def test_summary_block(self, build: BuildRecord) -> str:
        summary = build.test_summary
        if summary is None:
            return NO_TESTS
        return (
            "\nTest Status:\n"
            f"\tPassed: {summary.passed}, Failed: {summary.failed}, Skipped: {summary.skipped}"
        )

    def custom_message_block(self, build: BuildRecord) -> str:
        """
        The custom message template expanded against the build's environment.

        Resolution failures are logged and the template is expanded against
        an empty environment instead.
        """
        return "\n" + escape(expand_macros(self.preferences.custom_message, self._environment(build)))

    def back_to_normal_duration(self, build: BuildRecord) -> str:
        """How long the project was broken: end of the last success to end of this build."""
        previous_success = build.previous_successful_build
        if previous_success is None:
            return build.duration_string(self._now())
        return format_timespan(build.end_time - previous_success.end_time)

    # Internals

    def _blocks(self, build: BuildRecord, include_test_summary: bool) -> str:
        blocks = ""
        if include_test_summary:
            blocks += self.test_summary_block(build)
        if self.preferences.include_custom_message:
            blocks += self.custom_message_block(build)
        return blocks

    def _status_duration(self, status: BuildStatus, build: BuildRecord) -> str:
        if status == BuildStatus.BACK_TO_NORMAL:
            return self.back_to_normal_duration(build)
        return build.duration_string(self._now())

    def _environment(self, build: BuildRecord) -> Mapping[str, str]:
        if self.resolver is None:
            return {}
        try:
            return self.resolver.get_environment(build)
        except Exception as e:
            self.logger.error(
                "Failed to resolve environment for %s %s: %s",
                build.project_full_name,
                build.display_name,
                e,
                exc_info=True,
            )
            capture_exception(
                exception=e,
                tags={"project": build.project_full_name},
                extra={"build": build.number},
            )
            return {}

    def _now(self) -> Optional[datetime]:
        return self.clock() if self.clock else None
