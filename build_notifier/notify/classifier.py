"""
Result Classification

Decides which notification, if any, a completed build deserves, based on its
result, the result of the build before it, and the user's preferences.
"""

from enum import Enum
from typing import Optional

from ..models.build import BuildRecord, BuildResult
from ..models.preferences import NotificationPreferences


class ResultMessageType(Enum):
    """Notification intent for a completed build."""
    ABORTED = "aborted"
    SUCCESS = "success"
    BACK_TO_NORMAL = "back_to_normal"
    FAILURE = "failure"
    REPEATED_FAILURE = "repeated_failure"
    NOT_BUILT = "not_built"
    UNSTABLE = "unstable"
    NO_MESSAGE = "no_message"


class BuildStatus(Enum):
    """Human-readable status word for a build."""
    STARTING = "Starting..."
    BACK_TO_NORMAL = "Back to normal"
    STILL_FAILING = "Still Failing"
    SUCCESS = "Success"
    FAILURE = "Failure"
    ABORTED = "Aborted"
    NOT_BUILT = "Not built"
    UNSTABLE = "Unstable"
    UNKNOWN = "Unknown"


_RESULT_STATUS = {
    BuildResult.SUCCESS: BuildStatus.SUCCESS,
    BuildResult.FAILURE: BuildStatus.FAILURE,
    BuildResult.ABORTED: BuildStatus.ABORTED,
    BuildResult.NOT_BUILT: BuildStatus.NOT_BUILT,
    BuildResult.UNSTABLE: BuildStatus.UNSTABLE,
}

_BROKEN = (BuildResult.FAILURE, BuildResult.UNSTABLE)


def _skip_aborted(build: Optional[BuildRecord], completed_only: bool) -> BuildResult:
    """Result of the newest non-aborted build from ``build`` backwards, default SUCCESS."""
    while build is not None and build.result == BuildResult.ABORTED:
        build = build.previous_completed_build if completed_only else build.previous_build
    if build is None or build.result is None:
        return BuildResult.SUCCESS
    return build.result


def effective_previous_result(build: BuildRecord) -> BuildResult:
    """
    Result of the last completed, non-aborted build before ``build``.

    Aborted builds are skipped so that FAILURE -> ABORTED -> SUCCESS still
    counts as a recovery. Defaults to SUCCESS when no such build exists.
    """
    return _skip_aborted(build.previous_completed_build, completed_only=True)


def classify(
    result: Optional[BuildResult],
    previous_result: BuildResult,
    preferences: NotificationPreferences,
) -> ResultMessageType:
    """
    Pick the notification intent for a completed build. First match wins.

    Args:
        result: The build's result
        previous_result: Effective previous result (see effective_previous_result)
        preferences: User notification settings

    Returns:
        The ResultMessageType, NO_MESSAGE when nothing should be sent
    """
    if result == BuildResult.ABORTED and preferences.notify_aborted:
        return ResultMessageType.ABORTED

    # A failure after a failure falls through to the repeated-failure rule
    if (result == BuildResult.FAILURE
            and previous_result != BuildResult.FAILURE
            and preferences.notify_failure):
        return ResultMessageType.FAILURE

    if result == BuildResult.FAILURE and preferences.notify_repeated_failure:
        return ResultMessageType.REPEATED_FAILURE

    if result == BuildResult.NOT_BUILT and preferences.notify_not_built:
        return ResultMessageType.NOT_BUILT

    if (result == BuildResult.SUCCESS
            and previous_result in _BROKEN
            and preferences.notify_back_to_normal):
        return ResultMessageType.BACK_TO_NORMAL

    if result == BuildResult.SUCCESS and preferences.notify_success:
        return ResultMessageType.SUCCESS

    if result == BuildResult.UNSTABLE and preferences.notify_unstable:
        return ResultMessageType.UNSTABLE

    return ResultMessageType.NO_MESSAGE


def classify_build(build: BuildRecord, preferences: NotificationPreferences) -> ResultMessageType:
    """Classify a completed build against its own history."""
    return classify(build.result, effective_previous_result(build), preferences)


def build_status(build: BuildRecord) -> BuildStatus:
    """
    Status word for a build.

    Unlike classify(), "Back to normal" additionally requires that the
    project has succeeded at least once before this build.
    """
    if build.building:
        return BuildStatus.STARTING

    result = build.result
    previous_result = _skip_aborted(build.previous_build, completed_only=False)
    has_succeeded_before = build.previous_successful_build is not None

    if result == BuildResult.SUCCESS and previous_result in _BROKEN and has_succeeded_before:
        return BuildStatus.BACK_TO_NORMAL
    if result == BuildResult.FAILURE and previous_result == BuildResult.FAILURE:
        return BuildStatus.STILL_FAILING
    return _RESULT_STATUS.get(result, BuildStatus.UNKNOWN)


def build_color(result: Optional[BuildResult]) -> str:
    """Attachment colour for a build result."""
    if result == BuildResult.SUCCESS:
        return "good"
    if result == BuildResult.FAILURE:
        return "danger"
    return "warning"
