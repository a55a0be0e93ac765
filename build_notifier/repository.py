"""Build Repository - Access to build records owned by the host job system."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import BuildNotFoundError, HistoryFormatError
from .models.build import (
    BuildRecord,
    BuildResult,
    Cause,
    CauseKind,
    ChangeEntry,
    TestSummary,
)

logger = logging.getLogger(__name__)


class BuildRepository(ABC):
    """Abstract interface for looking up builds."""

    @abstractmethod
    def get_build(self, project: str, number: int) -> BuildRecord:
        """Get a build by project full name and number. Raises BuildNotFoundError."""
        pass

    @abstractmethod
    def get_last_build(self, project: str) -> BuildRecord:
        """Get the newest build of a project. Raises BuildNotFoundError."""
        pass

    @abstractmethod
    def project_names(self) -> List[str]:
        """Full names of all known projects, in insertion order."""
        pass


def link_history(builds: Iterable[BuildRecord]) -> List[BuildRecord]:
    """
    Fill in the ``previous_*`` links of one project's builds.

    Args:
        builds: Builds of a single project, in any order

    Returns:
        New records ordered oldest first, each linked to the older ones
    """
    linked: List[BuildRecord] = []
    previous = None
    last_completed = None
    last_successful = None

    for build in sorted(builds, key=lambda b: b.number):
        record = replace(
            build,
            previous_build=previous,
            previous_completed_build=last_completed,
            previous_successful_build=last_successful,
        )
        linked.append(record)

        previous = record
        if record.is_completed:
            last_completed = record
        if record.result == BuildResult.SUCCESS:
            last_successful = record

    return linked


class InMemoryBuildRepository(BuildRepository):
    """Repository holding linked build histories in memory."""

    def __init__(self):
        self.data: Dict[str, Dict[int, BuildRecord]] = {}

    def add_history(self, builds: Iterable[BuildRecord]) -> List[BuildRecord]:
        """Link and store a project's builds. Returns the linked records, oldest first."""
        linked = link_history(builds)
        for build in linked:
            self.data.setdefault(build.project_full_name, {})[build.number] = build
        return linked

    def get_build(self, project: str, number: int) -> BuildRecord:
        try:
            return self.data[project][number]
        except KeyError:
            raise BuildNotFoundError(project, number) from None

    def get_last_build(self, project: str) -> BuildRecord:
        builds = self.data.get(project)
        if not builds:
            raise BuildNotFoundError(project, 0)
        return builds[max(builds)]

    def project_names(self) -> List[str]:
        return list(self.data)


# History documents (JSON)

def _field(data: Dict[str, Any], key: str, kind, default=None, where: str = "build"):
    """Fetch an optional field. null counts as absent; other wrong types raise."""
    value = data.get(key)
    if value is None:
        return default
    # JSON true/false must not pass as numbers
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise HistoryFormatError(f"{where}: {key!r} has unexpected value {value!r}")
    return value


def _int_field(data: Dict[str, Any], key: str, default: Optional[int], where: str) -> Optional[int]:
    value = _field(data, key, (int, str), where=where)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise HistoryFormatError(f"{where}: {key!r} must be an integer, got {value!r}") from None


def _parse_time(value: Optional[str]) -> datetime:
    if not value:
        raise HistoryFormatError("Build is missing 'start_time'")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise HistoryFormatError(f"Invalid start_time {value!r}: {e}") from e


def _parse_result(value: Optional[str]) -> Optional[BuildResult]:
    if value is None:
        return None
    try:
        return BuildResult(value.upper())
    except ValueError:
        raise HistoryFormatError(f"Unknown build result {value!r}") from None


def _parse_cause(data: Any, where: str) -> Cause:
    if not isinstance(data, dict):
        raise HistoryFormatError(f"{where}: cause must be an object, got {data!r}")

    kind = _field(data, "kind", str, "other", where)
    try:
        cause_kind = CauseKind(kind.lower())
    except ValueError:
        logger.warning("Unknown cause kind %r, treating as 'other'", kind)
        cause_kind = CauseKind.OTHER

    return Cause(
        kind=cause_kind,
        description=_field(data, "description", str, "", where),
        upstream_project=_field(data, "upstream_project", str, None, where),
        upstream_build=_int_field(data, "upstream_build", None, where),
    )


def _parse_change(data: Any, where: str) -> ChangeEntry:
    if not isinstance(data, dict):
        raise HistoryFormatError(f"{where}: change must be an object, got {data!r}")
    return ChangeEntry(
        author=_field(data, "author", str, "", where),
        message=_field(data, "message", str, "", where),
        affected_paths=frozenset(str(f) for f in _field(data, "files", list, [], where)),
    )


def _parse_build(project: Dict[str, Any], data: Any) -> BuildRecord:
    full_name = project["full_name"]
    if not isinstance(data, dict):
        raise HistoryFormatError(f"{full_name}: build must be an object, got {data!r}")
    if data.get("number") is None:
        raise HistoryFormatError(f"Build in project {full_name!r} is missing 'number'")

    where = f"{full_name} build {data['number']!r}"
    number = _int_field(data, "number", None, where)

    tests = _field(data, "tests", dict, None, where)
    test_summary = None
    if tests is not None:
        test_summary = TestSummary(
            total=_int_field(tests, "total", 0, where),
            failed=_int_field(tests, "failed", 0, where),
            skipped=_int_field(tests, "skipped", 0, where),
        )

    return BuildRecord(
        number=number,
        project_full_name=full_name,
        project_display_name=_field(project, "display_name", str, "", full_name),
        display_name=_field(data, "display_name", str, "", where),
        start_time=_parse_time(_field(data, "start_time", str, None, where)),
        duration=timedelta(milliseconds=_int_field(data, "duration_ms", 0, where)),
        result=_parse_result(_field(data, "result", str, None, where)),
        building=_field(data, "building", bool, False, where),
        url=_field(data, "url", str, "", where),
        variables={str(k): str(v) for k, v in _field(data, "variables", dict, {}, where).items()},
        causes=[_parse_cause(c, where) for c in _field(data, "causes", list, [], where)],
        test_summary=test_summary,
        change_set=[_parse_change(c, where) for c in _field(data, "changes", list, [], where)],
    )


def parse_history(document: Any) -> InMemoryBuildRepository:
    """
    Build a repository from a history document.

    Expected shape::

        {"projects": [{"full_name": "...", "display_name": "...",
                       "builds": [{"number": 1, "result": "SUCCESS", ...}]}]}

    Any structural problem raises HistoryFormatError.
    """
    projects = document.get("projects") if isinstance(document, dict) else None
    if not isinstance(projects, list):
        raise HistoryFormatError("History document must contain a 'projects' list")

    repository = InMemoryBuildRepository()
    for project in projects:
        if not isinstance(project, dict) or not isinstance(project.get("full_name"), str):
            raise HistoryFormatError("Project entry is missing 'full_name'")
        raw_builds = _field(project, "builds", list, [], project["full_name"])
        builds = [_parse_build(project, b) for b in raw_builds]
        repository.add_history(builds)
        logger.debug("Loaded %d builds for %s", len(builds), project["full_name"])

    return repository


def load_history(path: str) -> InMemoryBuildRepository:
    """Load a JSON history document from disk."""
    try:
        with open(Path(path)) as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise HistoryFormatError(f"{path}: invalid JSON: {e}") from e
    return parse_history(document)
