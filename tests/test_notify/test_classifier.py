"""Tests for result classification (classifier.py)."""

import pytest

from build_notifier.models import BuildResult, NotificationPreferences
from build_notifier.notify.classifier import (
    BuildStatus,
    ResultMessageType,
    build_color,
    build_status,
    classify,
    classify_build,
    effective_previous_result,
)

S = BuildResult.SUCCESS
F = BuildResult.FAILURE
U = BuildResult.UNSTABLE
A = BuildResult.ABORTED
N = BuildResult.NOT_BUILT


def prefs(**flags):
    """Preferences with every flag off except the ones given."""
    base = dict(
        notify_aborted=False,
        notify_failure=False,
        notify_repeated_failure=False,
        notify_not_built=False,
        notify_back_to_normal=False,
        notify_success=False,
        notify_unstable=False,
    )
    base.update(flags)
    return NotificationPreferences(**base)


class TestClassify:
    @pytest.mark.parametrize("result, previous, flags, expected", [
        (A, S, {"notify_aborted": True}, ResultMessageType.ABORTED),
        (F, S, {"notify_failure": True}, ResultMessageType.FAILURE),
        (F, U, {"notify_failure": True}, ResultMessageType.FAILURE),
        (F, F, {"notify_repeated_failure": True}, ResultMessageType.REPEATED_FAILURE),
        (F, S, {"notify_repeated_failure": True}, ResultMessageType.REPEATED_FAILURE),
        (N, S, {"notify_not_built": True}, ResultMessageType.NOT_BUILT),
        (S, F, {"notify_back_to_normal": True}, ResultMessageType.BACK_TO_NORMAL),
        (S, U, {"notify_back_to_normal": True}, ResultMessageType.BACK_TO_NORMAL),
        (S, S, {"notify_success": True}, ResultMessageType.SUCCESS),
        (U, S, {"notify_unstable": True}, ResultMessageType.UNSTABLE),
    ])
    def test_single_rule(self, result, previous, flags, expected):
        assert classify(result, previous, prefs(**flags)) == expected

    @pytest.mark.parametrize("result", [S, F, U, A, N, None])
    def test_everything_disabled_sends_nothing(self, result):
        assert classify(result, S, prefs()) == ResultMessageType.NO_MESSAGE

    def test_repeated_failure_wins_after_failure(self):
        p = prefs(notify_failure=True, notify_repeated_failure=True)
        assert classify(F, F, p) == ResultMessageType.REPEATED_FAILURE

    def test_first_failure_wins_over_repeated(self):
        p = prefs(notify_failure=True, notify_repeated_failure=True)
        assert classify(F, S, p) == ResultMessageType.FAILURE

    def test_failure_after_failure_without_repeated_flag(self):
        assert classify(F, F, prefs(notify_failure=True)) == ResultMessageType.NO_MESSAGE

    def test_back_to_normal_wins_over_success(self):
        p = prefs(notify_back_to_normal=True, notify_success=True)
        assert classify(S, F, p) == ResultMessageType.BACK_TO_NORMAL

    def test_success_after_success_with_back_to_normal_only(self):
        assert classify(S, S, prefs(notify_back_to_normal=True)) == ResultMessageType.NO_MESSAGE

    def test_recovery_falls_back_to_success(self):
        assert classify(S, F, prefs(notify_success=True)) == ResultMessageType.SUCCESS

    def test_back_to_normal_not_from_aborted(self):
        assert classify(S, A, prefs(notify_back_to_normal=True)) == ResultMessageType.NO_MESSAGE

    def test_in_progress_result(self, all_enabled):
        assert classify(None, F, all_enabled) == ResultMessageType.NO_MESSAGE


class TestEffectivePreviousResult:
    def test_no_previous_build_defaults_to_success(self, history):
        (build,) = history(F)
        assert effective_previous_result(build) == S

    def test_previous_result(self, history):
        builds = history(U, S)
        assert effective_previous_result(builds[-1]) == U

    def test_aborted_builds_are_skipped(self, history):
        builds = history(S, A, F)
        assert effective_previous_result(builds[-1]) == S

    def test_several_aborted_builds_are_skipped(self, history):
        builds = history(F, A, A, S)
        assert effective_previous_result(builds[-1]) == F

    def test_only_aborted_history_defaults_to_success(self, history):
        builds = history(A, A, F)
        assert effective_previous_result(builds[-1]) == S

    def test_running_builds_are_not_previous(self, history):
        # build 2 is still running while build 3 completes
        builds = history(F, None, S)
        assert effective_previous_result(builds[-1]) == F


class TestClassifyBuild:
    def test_abort_between_failure_and_success_is_back_to_normal(self, history, all_enabled):
        builds = history(S, F, A, S)
        assert classify_build(builds[-1], all_enabled) == ResultMessageType.BACK_TO_NORMAL

    def test_abort_between_success_and_failure_is_first_failure(self, history, all_enabled):
        builds = history(S, A, F)
        assert classify_build(builds[-1], all_enabled) == ResultMessageType.FAILURE

    def test_first_build_success_is_not_back_to_normal(self, history, all_enabled):
        (build,) = history(S)
        assert classify_build(build, all_enabled) == ResultMessageType.SUCCESS


class TestBuildStatus:
    def test_running_build(self, history):
        builds = history(S, None)
        assert build_status(builds[-1]) == BuildStatus.STARTING

    def test_first_success(self, history):
        (build,) = history(S)
        assert build_status(build) == BuildStatus.SUCCESS

    def test_back_to_normal(self, history):
        builds = history(S, F, S)
        assert build_status(builds[-1]) == BuildStatus.BACK_TO_NORMAL

    def test_back_to_normal_from_unstable(self, history):
        builds = history(S, U, S)
        assert build_status(builds[-1]) == BuildStatus.BACK_TO_NORMAL

    def test_first_ever_success_is_not_back_to_normal(self, history):
        builds = history(F, S)
        assert build_status(builds[-1]) == BuildStatus.SUCCESS

    def test_aborted_builds_do_not_hide_recovery(self, history):
        builds = history(S, F, A, S)
        assert build_status(builds[-1]) == BuildStatus.BACK_TO_NORMAL

    def test_still_failing(self, history):
        builds = history(F, F)
        assert build_status(builds[-1]) == BuildStatus.STILL_FAILING

    @pytest.mark.parametrize("result, expected", [
        (F, BuildStatus.FAILURE),
        (A, BuildStatus.ABORTED),
        (N, BuildStatus.NOT_BUILT),
        (U, BuildStatus.UNSTABLE),
    ])
    def test_result_words(self, history, result, expected):
        builds = history(S, result)
        assert build_status(builds[-1]) == expected

    def test_unknown_result(self, make_build):
        build = make_build(1, result=None)
        assert build_status(build) == BuildStatus.UNKNOWN

    def test_status_words(self):
        assert BuildStatus.STARTING.value == "Starting..."
        assert BuildStatus.BACK_TO_NORMAL.value == "Back to normal"
        assert BuildStatus.STILL_FAILING.value == "Still Failing"


class TestBuildColor:
    @pytest.mark.parametrize("result, color", [
        (S, "good"),
        (F, "danger"),
        (U, "warning"),
        (A, "warning"),
        (N, "warning"),
        (None, "warning"),
    ])
    def test_colors(self, result, color):
        assert build_color(result) == color
