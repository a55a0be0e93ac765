"""Shared pytest fixtures for build notifier tests."""

from datetime import datetime, timedelta

import pytest

from build_notifier.models import (
    BuildRecord,
    BuildResult,
    CommitInfoChoice,
    NotificationPreferences,
)
from build_notifier.notify.sink import MockNotificationSink
from build_notifier.repository import InMemoryBuildRepository

BASE_TIME = datetime(2024, 5, 1, 10, 0, 0)


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def make_build():
    """
    Factory for unlinked builds of project "app".

    Build N starts N hours after BASE_TIME and runs for one minute.
    """
    def _make(number, result=BuildResult.SUCCESS, **kwargs):
        defaults = dict(
            number=number,
            project_full_name="app",
            start_time=BASE_TIME + timedelta(hours=number),
            duration=timedelta(minutes=1),
            result=result,
            url=f"job/app/{number}/",
        )
        defaults.update(kwargs)
        return BuildRecord(**defaults)
    return _make


@pytest.fixture
def repository():
    return InMemoryBuildRepository()


@pytest.fixture
def history(repository, make_build):
    """
    Factory creating a linked history from a list of results.

    ``None`` entries are running builds. Returns the linked builds, oldest first.
    """
    def _history(*results, **last_build_kwargs):
        builds = [
            make_build(i + 1, result=result, building=result is None)
            for i, result in enumerate(results)
        ]
        if last_build_kwargs:
            last = builds[-1]
            builds[-1] = make_build(
                last.number,
                result=last.result,
                building=last.building,
                **last_build_kwargs,
            )
        return repository.add_history(builds)
    return _history


@pytest.fixture
def all_enabled():
    """Preferences with every notification enabled."""
    return NotificationPreferences(
        notify_aborted=True,
        notify_failure=True,
        notify_repeated_failure=True,
        notify_not_built=True,
        notify_back_to_normal=True,
        notify_success=True,
        notify_unstable=True,
        build_server_url="https://ci.example.com",
    )


@pytest.fixture
def preferences():
    """Default preferences pointing at a build server."""
    return NotificationPreferences(
        build_server_url="https://ci.example.com",
        commit_info_choice=CommitInfoChoice.AUTHORS_AND_TITLES,
    )


@pytest.fixture
def mock_sink():
    return MockNotificationSink()
