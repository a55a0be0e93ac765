from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from ..helpers.timespan import format_timespan


class BuildResult(Enum):
    """Terminal outcome of a build."""
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


class CauseKind(Enum):
    """What triggered a build."""
    SCM = "scm"
    UPSTREAM = "upstream"
    USER = "user"
    TIMER = "timer"
    REMOTE = "remote"
    OTHER = "other"


@dataclass(frozen=True)
class Cause:
    """One trigger cause attached to a build."""
    kind: CauseKind
    description: str = ""
    upstream_project: Optional[str] = None
    upstream_build: Optional[int] = None

    @property
    def is_scm(self) -> bool:
        return self.kind == CauseKind.SCM

    @property
    def is_upstream(self) -> bool:
        return self.kind == CauseKind.UPSTREAM and self.upstream_project is not None


@dataclass(frozen=True)
class ChangeEntry:
    """A single source-control change (commit) associated with a build."""
    author: str
    message: str
    affected_paths: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class TestSummary:
    """Aggregated test counts recorded for a build."""
    __test__ = False

    total: int
    failed: int = 0
    skipped: int = 0

    @property
    def passed(self) -> int:
        return self.total - self.failed - self.skipped


@dataclass(frozen=True)
class BuildRecord:
    """
    A single execution of a project, as reported by the host job system.

    The ``previous_*`` links point at strictly older builds of the same project
    and end in None. Records are never mutated; see
    ``build_notifier.repository.link_history`` for how the links are filled in.
    """
    number: int
    project_full_name: str
    start_time: datetime
    duration: timedelta = timedelta(0)
    result: Optional[BuildResult] = None
    building: bool = False
    display_name: str = ""
    project_display_name: str = ""
    url: str = ""
    variables: Dict[str, str] = field(default_factory=dict, compare=False)
    causes: List[Cause] = field(default_factory=list, compare=False)
    test_summary: Optional[TestSummary] = None
    change_set: List[ChangeEntry] = field(default_factory=list, compare=False)
    previous_build: Optional["BuildRecord"] = field(default=None, repr=False, compare=False)
    previous_completed_build: Optional["BuildRecord"] = field(default=None, repr=False, compare=False)
    previous_successful_build: Optional["BuildRecord"] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        # frozen, so defaults derived from other fields go through object.__setattr__
        if not self.display_name:
            object.__setattr__(self, "display_name", f"#{self.number}")
        if not self.project_display_name:
            object.__setattr__(self, "project_display_name", self.project_full_name)

    @property
    def end_time(self) -> datetime:
        return self.start_time + self.duration

    @property
    def is_completed(self) -> bool:
        return not self.building and self.result is not None

    @property
    def upstream_cause(self) -> Optional[Cause]:
        """First cause that points at an upstream build, if any."""
        for cause in self.causes:
            if cause.is_upstream:
                return cause
        return None

    def duration_string(self, now: Optional[datetime] = None) -> str:
        """
        Human-readable duration.

        Running builds report the time elapsed since they started, e.g.
        ``"2 min 5 sec and counting"``.
        """
        if self.building:
            now = now or datetime.now(self.start_time.tzinfo)
            return f"{format_timespan(now - self.start_time)} and counting"
        return format_timespan(self.duration)
