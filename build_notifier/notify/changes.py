"""
Change Summaries

Describes the source-control changes behind a build, either as a one-line
"started by" summary or as a bulleted commit list.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from ..errors import UpstreamCycleError
from ..helpers.escape import escape
from ..models.build import BuildRecord
from ..models.preferences import NotificationPreferences
from ..repository import BuildRepository

NO_CHANGES = "No Changes."


class ChangeSummarizer:
    """
    Renders a build's change set.

    Usage:
        summarizer = ChangeSummarizer(preferences, repository)
        summarizer.summarize_for_start(build)  # "Started by changes from ..."
        summarizer.commit_list(build)          # "Changes:\\n- ..."
    """

    def __init__(
        self,
        preferences: NotificationPreferences,
        repository: BuildRepository,
        logger: Optional[logging.Logger] = None,
    ):
        self.preferences = preferences
        self.repository = repository
        self.logger = logger or logging.getLogger(__name__)

    def summarize_for_start(self, build: BuildRecord) -> Optional[str]:
        """
        One-line summary of who changed what.

        Returns:
            Escaped summary, or None when the build has no changes
        """
        if not build.change_set:
            self.logger.info("No changes for %s %s", build.project_full_name, build.display_name)
            return None

        # dict keeps first-seen order
        authors: Dict[str, None] = {}
        files: Set[str] = set()
        for entry in build.change_set:
            self.logger.debug("Entry %s: %s", entry.author, entry.message)
            authors[entry.author] = None
            files.update(entry.affected_paths)

        return (
            f"Started by changes from {escape(', '.join(authors))}"
            f" ({len(files)} file(s) changed)"
        )

    def commit_list(self, build: BuildRecord) -> str:
        """
        Bulleted list of the build's commits.

        Builds without changes of their own fall back to the upstream build
        that triggered them, repeatedly. A missing upstream build raises
        BuildNotFoundError, a chain that revisits a build UpstreamCycleError.
        """
        visited: Set[Tuple[str, int]] = {(build.project_full_name, build.number)}
        while not build.change_set:
            cause = build.upstream_cause
            if cause is None:
                self.logger.info("Empty change set for %s %s", build.project_full_name, build.display_name)
                return NO_CHANGES
            self.logger.info(
                "No changes for %s %s, using upstream %s #%s",
                build.project_full_name,
                build.display_name,
                cause.upstream_project,
                cause.upstream_build,
            )
            key = (cause.upstream_project, cause.upstream_build)
            if key in visited:
                raise UpstreamCycleError(*key)
            visited.add(key)
            build = self.repository.get_build(*key)

        choice = self.preferences.commit_info_choice
        # Entries that render identically collapse into one line
        commits: Dict[str, None] = {}
        for entry in build.change_set:
            parts: List[str] = []
            if choice.show_title:
                parts.append(entry.message)
            if choice.show_author:
                parts.append(f" [{entry.author}]")
            commits["".join(parts)] = None

        return escape("Changes:\n- " + "\n- ".join(commits))
